"""
Quiz delivery schemas: session state snapshots and presentation payloads
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from quizhub.models.quiz import QuestionType
from quizhub.schemas.quiz import PublicQuestion


class QuizSnapshot(BaseModel):
    """Quiz settings captured when a delivery starts"""
    id: int
    title: str
    random_order: bool = False
    one_page: bool = False
    immediate_correction: bool = False
    practice_mode: bool = False

    class Config:
        from_attributes = True


class QuestionSnapshot(BaseModel):
    """Question as held in session state, including its correct answer"""
    id: int
    quiz_id: int
    question_type: QuestionType
    question_text: str
    correct_answer: str
    choices: Optional[List[str]] = None
    image_url: Optional[str] = None
    order_num: int

    class Config:
        from_attributes = True


class DeliveryState(BaseModel):
    """
    Ephemeral state of one in-progress quiz.

    ``current_index`` is a valid index into ``questions`` or equals its
    length. Outside of feedback display ``len(answers) == current_index``;
    while feedback is shown the slot for ``current_index`` is filled too.
    """
    quiz: QuizSnapshot
    questions: List[QuestionSnapshot]
    current_index: int = 0
    answers: List[str] = []
    started_at: datetime
    practice: bool = False
    feedback_shown: bool = False
    user_id: Optional[int] = None


class AnswerFeedback(BaseModel):
    correct: bool
    message: str
    correct_answer: Optional[str] = None


class QuestionPresentation(BaseModel):
    """One question at a time (stepwise delivery)"""
    phase: Literal["question"] = "question"
    quiz_id: int
    quiz_title: str
    question: PublicQuestion
    question_number: int
    total_questions: int
    practice: bool
    immediate_correction: bool
    submitted_answer: Optional[str] = None
    feedback: Optional[AnswerFeedback] = None
    session_id: Optional[str] = None


class AllQuestionsPresentation(BaseModel):
    """Every question on one page"""
    phase: Literal["all_questions"] = "all_questions"
    quiz_id: int
    quiz_title: str
    questions: List[PublicQuestion]
    total_questions: int
    practice: bool
    session_id: Optional[str] = None


class QuizResult(BaseModel):
    """Graded outcome of a finished delivery"""
    phase: Literal["result"] = "result"
    quiz_id: int
    quiz_title: str
    score: float
    correct: int
    total_questions: int
    time_taken: int
    practice: bool
    correctness: List[bool]
    attempt_id: Optional[int] = None
    new_achievements: List[str] = []
    session_id: Optional[str] = None


Presentation = Annotated[
    Union[QuestionPresentation, AllQuestionsPresentation, QuizResult],
    Field(discriminator="phase"),
]


class AnswerSubmission(BaseModel):
    answer: Optional[str] = None


class AllAnswersSubmission(BaseModel):
    answers: List[Optional[str]] = []


class TakeAction(BaseModel):
    """Raw action as posted by a quiz page"""
    action: Optional[str] = None
    answer: Optional[str] = None
    answers: Optional[List[Optional[str]]] = None
