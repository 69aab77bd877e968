"""
Quiz schemas for QuizHub
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from quizhub.models.quiz import QuestionType


class QuestionCreate(BaseModel):
    """Question authoring schema"""
    question_type: QuestionType = QuestionType.QUESTION_RESPONSE
    question_text: str = Field(..., min_length=1)
    correct_answer: str = Field(..., min_length=1)
    choices: List[str] = []
    image_url: Optional[str] = None


class QuizCreate(BaseModel):
    """Quiz creation schema"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    random_order: bool = False
    one_page: bool = False
    immediate_correction: bool = False
    practice_mode: bool = False
    questions: List[QuestionCreate] = []


class PublicQuestion(BaseModel):
    """Question as shown to a quiz taker, never carries the answer"""
    id: int
    question_type: QuestionType
    question_text: str
    order_num: int
    choices: Optional[List[str]] = None
    image_url: Optional[str] = None


class QuizResponse(BaseModel):
    """Quiz response schema"""
    id: int
    title: str
    description: Optional[str]
    creator_id: int
    random_order: bool
    one_page: bool
    immediate_correction: bool
    practice_mode: bool
    created_at: datetime

    class Config:
        from_attributes = True


class QuizDetailResponse(QuizResponse):
    """Quiz with its questions"""
    questions: List[PublicQuestion] = []


class QuizCreateResponse(BaseModel):
    quiz: QuizResponse
    new_achievements: List[str] = []


class QuizAttemptResponse(BaseModel):
    """Quiz attempt response schema"""
    id: int
    user_id: int
    quiz_id: int
    score: float
    total_questions: int
    time_taken: int
    date_taken: datetime
    is_practice: bool

    class Config:
        from_attributes = True


class QuizHistoryResponse(BaseModel):
    quiz_id: int
    mode: str
    attempts: List[QuizAttemptResponse]
    average_score: Optional[float]
