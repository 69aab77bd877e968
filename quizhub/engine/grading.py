"""
Grading of submitted answers.

A question's ``correct_answer`` holds one or more alternatives separated by
commas. A submission is correct when, trimmed and compared without regard
to case, it equals any trimmed alternative. Every question type is graded
this way; the page only limits which strings can be submitted.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from quizhub.models.quiz import QuestionType


@dataclass(frozen=True)
class GradeResult:
    correct_count: int
    total_questions: int
    score: float
    correctness: List[bool]


def answer_alternatives(correct_answer: str) -> List[str]:
    alternatives = (alt.strip().lower() for alt in correct_answer.split(","))
    return [alt for alt in alternatives if alt]


def matches_alternative(correct_answer: str, submitted: Optional[str]) -> bool:
    if submitted is None:
        return False
    return submitted.strip().lower() in answer_alternatives(correct_answer)


# One matcher per question type; a new type must be added here to be gradable
ANSWER_MATCHERS: Dict[QuestionType, Callable[[str, Optional[str]], bool]] = {
    QuestionType.QUESTION_RESPONSE: matches_alternative,
    QuestionType.FILL_IN_BLANK: matches_alternative,
    QuestionType.MULTIPLE_CHOICE: matches_alternative,
    QuestionType.PICTURE_RESPONSE: matches_alternative,
}

if set(ANSWER_MATCHERS) != set(QuestionType):
    raise RuntimeError("every question type needs a matcher")


def is_correct(question, submitted: Optional[str]) -> bool:
    """Grade one answer against ``question.correct_answer``"""
    matcher = ANSWER_MATCHERS[QuestionType(question.question_type)]
    return matcher(question.correct_answer, submitted)


def grade(questions: Sequence, answers: Sequence[Optional[str]]) -> GradeResult:
    """
    Grade a full answer set.

    Answers line up with questions by position. A missing answer counts as
    an empty string and is never correct. ``questions`` must not be empty.
    """
    if not questions:
        raise ValueError("cannot grade a quiz without questions")

    correctness = []
    for index, question in enumerate(questions):
        submitted = answers[index] if index < len(answers) else None
        correctness.append(is_correct(question, submitted))

    correct_count = sum(correctness)
    score = correct_count / len(questions) * 100.0
    return GradeResult(
        correct_count=correct_count,
        total_questions=len(questions),
        score=score,
        correctness=correctness,
    )
