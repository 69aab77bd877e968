"""
Quiz models for QuizHub
"""

import enum

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from quizhub.core.database import Base
from quizhub.utils.clock import utc_now


class QuestionType(str, enum.Enum):
    """Question types"""
    QUESTION_RESPONSE = "question-response"
    FILL_IN_BLANK = "fill-in-blank"
    MULTIPLE_CHOICE = "multiple-choice"
    PICTURE_RESPONSE = "picture-response"


class Quiz(Base):
    """Quiz model"""
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    random_order = Column(Boolean, default=False, nullable=False)
    one_page = Column(Boolean, default=False, nullable=False)
    immediate_correction = Column(Boolean, default=False, nullable=False)
    practice_mode = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utc_now)

    # Relationships
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.order_num",
    )
    attempts = relationship("QuizAttempt", back_populates="quiz")


class Question(Base):
    """Question model"""
    __tablename__ = "questions"
    __table_args__ = (UniqueConstraint("quiz_id", "order_num", name="uq_question_order"),)

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)

    question_type = Column(Enum(QuestionType), nullable=False, default=QuestionType.QUESTION_RESPONSE)
    question_text = Column(Text, nullable=False)
    correct_answer = Column(String, nullable=False)  # comma separated alternatives

    choices = Column(JSON, default=list)  # multiple-choice only
    image_url = Column(String, nullable=True)  # picture-response only

    order_num = Column(Integer, nullable=False)  # 1-based

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")


class QuizAttempt(Base):
    """Completed quiz attempt; written once, never updated"""
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)

    score = Column(Float, nullable=False)
    total_questions = Column(Integer, nullable=False)
    time_taken = Column(Integer, nullable=False)  # seconds
    date_taken = Column(DateTime, nullable=False, default=utc_now, index=True)
    is_practice = Column(Boolean, nullable=False, default=False)

    # Relationships
    quiz = relationship("Quiz", back_populates="attempts")
