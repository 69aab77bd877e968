"""Achievement service"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quizhub.core.exceptions import DatabaseException
from quizhub.models import Achievement, AchievementType

logger = logging.getLogger(__name__)


class AchievementService:
    def __init__(self, db: Session):
        self.db = db

    def has_achievement(self, user_id: int, achievement_type: AchievementType) -> bool:
        return (
            self.db.query(Achievement.id)
            .filter(Achievement.user_id == user_id, Achievement.achievement_type == achievement_type)
            .first()
            is not None
        )

    def award(self, user_id: int, achievement_type: AchievementType) -> bool:
        """Grant an achievement once; returns False when the user already holds it"""
        if self.has_achievement(user_id, achievement_type):
            return False

        achievement = Achievement(
            user_id=user_id,
            achievement_type=achievement_type,
            description=achievement_type.default_description,
        )
        try:
            self.db.add(achievement)
            self.db.commit()
        except IntegrityError:
            # Granted concurrently by another request
            self.db.rollback()
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("Failed to award achievement") from e
        return True

    def list_for_user(self, user_id: int) -> List[Achievement]:
        """Get user's achievements, newest first"""
        return (
            self.db.query(Achievement)
            .filter(Achievement.user_id == user_id)
            .order_by(Achievement.date_earned.desc(), Achievement.id.desc())
            .all()
        )
