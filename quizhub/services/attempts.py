"""Attempt store"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizhub.core.exceptions import DatabaseException
from quizhub.models import QuizAttempt

logger = logging.getLogger(__name__)


class AttemptStore:
    """Durable log of completed attempts"""

    def __init__(self, db: Session):
        self.db = db

    def insert_attempt(
        self,
        user_id: int,
        quiz_id: int,
        score: float,
        total_questions: int,
        time_taken: int,
        date_taken,
        is_practice: bool,
    ) -> QuizAttempt:
        """Insert and commit one attempt; nothing is kept on failure"""
        attempt = QuizAttempt(
            user_id=user_id,
            quiz_id=quiz_id,
            score=score,
            total_questions=total_questions,
            time_taken=time_taken,
            date_taken=date_taken,
            is_practice=is_practice,
        )
        try:
            self.db.add(attempt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to record attempt: {e}", extra={"quiz_id": quiz_id, "user_id": user_id})
            raise DatabaseException("Failed to record quiz attempt") from e

        self.db.refresh(attempt)
        logger.info(
            "Attempt recorded",
            extra={"attempt_id": attempt.id, "quiz_id": quiz_id, "user_id": user_id, "practice": is_practice},
        )
        return attempt

    def list_attempts_by_quiz(self, quiz_id: int, practice_only: bool = False) -> List[QuizAttempt]:
        """Practice attempts when ``practice_only``, graded attempts otherwise"""
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.quiz_id == quiz_id, QuizAttempt.is_practice == practice_only)
            .order_by(QuizAttempt.id)
            .all()
        )

    def list_attempts_by_user(self, user_id: int, quiz_id: Optional[int] = None) -> List[QuizAttempt]:
        query = self.db.query(QuizAttempt).filter(QuizAttempt.user_id == user_id)
        if quiz_id is not None:
            query = query.filter(QuizAttempt.quiz_id == quiz_id)
        return query.order_by(QuizAttempt.date_taken.desc(), QuizAttempt.id.desc()).all()

    def list_graded_attempts(self) -> List[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.is_practice.is_(False))
            .order_by(QuizAttempt.id)
            .all()
        )

    def count_graded_attempts(self, user_id: int) -> int:
        return (
            self.db.query(func.count(QuizAttempt.id))
            .filter(QuizAttempt.user_id == user_id, QuizAttempt.is_practice.is_(False))
            .scalar()
        )
