"""
Quiz delivery state machine.

A delivery is either one-page (every question shown at once, one
submission carries all answers) or stepwise (one question at a time).
Stepwise quizzes with immediate correction show feedback after each
answer and wait for an explicit ``next`` before moving on.

Transitions are pure: they take a :class:`DeliveryState` and an
:class:`Event` and return a :class:`Transition` holding the next state (or
``None`` once the quiz is complete), the payload to render, and, on
completion, a :class:`Completion` describing the attempt to record.
"""

import math
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Union

from quizhub.core.exceptions import NotFoundException
from quizhub.engine.grading import GradeResult, grade, is_correct
from quizhub.models.quiz import QuestionType
from quizhub.schemas.delivery import (
    AllQuestionsPresentation,
    AnswerFeedback,
    DeliveryState,
    QuestionPresentation,
    QuestionSnapshot,
    QuizResult,
    QuizSnapshot,
)
from quizhub.schemas.quiz import PublicQuestion

SUBMIT = "submit"
SUBMIT_ALL = "submit_all"
NEXT = "next"

Output = Union[QuestionPresentation, AllQuestionsPresentation, QuizResult]


@dataclass(frozen=True)
class Event:
    action: Optional[str]
    answer: Optional[str] = None
    answers: Optional[Sequence[Optional[str]]] = None


def submit(answer: Optional[str]) -> Event:
    return Event(SUBMIT, answer=answer)


def submit_all(answers: Sequence[Optional[str]]) -> Event:
    return Event(SUBMIT_ALL, answers=answers)


def advance() -> Event:
    return Event(NEXT)


@dataclass(frozen=True)
class Completion:
    """Everything needed to record the finished attempt"""
    quiz_id: int
    user_id: Optional[int]
    practice: bool
    grade: GradeResult
    time_taken: int
    completed_at: datetime


@dataclass(frozen=True)
class Transition:
    state: Optional[DeliveryState]
    output: Output
    completion: Optional[Completion] = None

    @property
    def completed(self) -> bool:
        return self.completion is not None


# Per-type presentation fields
_PRESENTERS: Dict[QuestionType, Callable[[QuestionSnapshot], dict]] = {
    QuestionType.QUESTION_RESPONSE: lambda q: {},
    QuestionType.FILL_IN_BLANK: lambda q: {},
    QuestionType.MULTIPLE_CHOICE: lambda q: {"choices": list(q.choices or [])},
    QuestionType.PICTURE_RESPONSE: lambda q: {"image_url": q.image_url},
}

if set(_PRESENTERS) != set(QuestionType):
    raise RuntimeError("every question type needs a presenter")


def public_question(question) -> PublicQuestion:
    """Strip the answer from a question and keep only its type's fields"""
    question_type = QuestionType(question.question_type)
    return PublicQuestion(
        id=question.id,
        question_type=question_type,
        question_text=question.question_text,
        order_num=question.order_num,
        **_PRESENTERS[question_type](question),
    )


def start(
    quiz,
    questions: Sequence,
    now: datetime,
    practice: bool = False,
    user_id: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Transition:
    """
    Begin a delivery.

    Questions are put in ``order_num`` order and, for random-order quizzes,
    shuffled once here; the order is then fixed for the whole delivery.
    """
    if quiz is None or not questions:
        raise NotFoundException("Quiz")

    snapshots = sorted(
        (QuestionSnapshot.model_validate(q) for q in questions),
        key=lambda q: q.order_num,
    )
    if quiz.random_order:
        (rng or random).shuffle(snapshots)

    state = DeliveryState(
        quiz=QuizSnapshot.model_validate(quiz),
        questions=snapshots,
        started_at=now,
        practice=practice,
        user_id=user_id,
    )
    return Transition(state=state, output=present(state))


def present(state: DeliveryState) -> Union[QuestionPresentation, AllQuestionsPresentation]:
    """Render the current position without feedback"""
    if state.quiz.one_page:
        return AllQuestionsPresentation(
            quiz_id=state.quiz.id,
            quiz_title=state.quiz.title,
            questions=[public_question(q) for q in state.questions],
            total_questions=len(state.questions),
            practice=state.practice,
        )
    return _question_view(state, state.current_index)


def apply(state: DeliveryState, event: Event, now: datetime) -> Transition:
    """Apply one event; unrecognized or out-of-place events re-render unchanged"""
    if state.quiz.one_page:
        if event.action == SUBMIT_ALL:
            return _complete(state, _pad(event.answers or [], len(state.questions)), now)
        return _unchanged(state)

    if state.quiz.immediate_correction:
        if event.action == SUBMIT:
            return _show_feedback(state, event.answer)
        if event.action == NEXT and state.feedback_shown:
            return _move_on(state, state.answers, now)
        return _unchanged(state)

    if event.action == SUBMIT:
        answers = state.answers[: state.current_index] + [event.answer or ""]
        return _move_on(state, answers, now)
    return _unchanged(state)


def _question_view(
    state: DeliveryState,
    index: int,
    submitted: Optional[str] = None,
    feedback: Optional[AnswerFeedback] = None,
) -> QuestionPresentation:
    return QuestionPresentation(
        quiz_id=state.quiz.id,
        quiz_title=state.quiz.title,
        question=public_question(state.questions[index]),
        question_number=index + 1,
        total_questions=len(state.questions),
        practice=state.practice,
        immediate_correction=state.quiz.immediate_correction,
        submitted_answer=submitted,
        feedback=feedback,
    )


def _unchanged(state: DeliveryState) -> Transition:
    return Transition(state=state, output=present(state))


def _show_feedback(state: DeliveryState, answer: Optional[str]) -> Transition:
    index = state.current_index
    question = state.questions[index]
    answer = answer or ""
    correct = is_correct(question, answer)

    feedback = AnswerFeedback(
        correct=correct,
        message="Correct" if correct else "Incorrect",
        correct_answer=None if correct else question.correct_answer,
    )
    next_state = state.model_copy(
        update={"answers": state.answers[:index] + [answer], "feedback_shown": True}
    )
    return Transition(
        state=next_state,
        output=_question_view(next_state, index, submitted=answer, feedback=feedback),
    )


def _move_on(state: DeliveryState, answers: List[str], now: datetime) -> Transition:
    next_index = state.current_index + 1
    if next_index >= len(state.questions):
        return _complete(state, answers, now)

    next_state = state.model_copy(
        update={"current_index": next_index, "answers": answers, "feedback_shown": False}
    )
    return Transition(state=next_state, output=present(next_state))


def _complete(state: DeliveryState, answers: List[str], now: datetime) -> Transition:
    result = grade(state.questions, answers)
    elapsed = (now - state.started_at).total_seconds()
    time_taken = max(0, math.floor(elapsed))

    completion = Completion(
        quiz_id=state.quiz.id,
        user_id=state.user_id,
        practice=state.practice,
        grade=result,
        time_taken=time_taken,
        completed_at=now,
    )
    output = QuizResult(
        quiz_id=state.quiz.id,
        quiz_title=state.quiz.title,
        score=result.score,
        correct=result.correct_count,
        total_questions=result.total_questions,
        time_taken=time_taken,
        practice=state.practice,
        correctness=result.correctness,
    )
    return Transition(state=None, output=output, completion=completion)


def _pad(answers: Sequence[Optional[str]], size: int) -> List[str]:
    padded = [answer or "" for answer in list(answers)[:size]]
    return padded + [""] * (size - len(padded))
