"""User service"""

from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from quizhub.models import User


class UserService:
    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_usernames(db: Session, user_ids: Iterable[int]) -> Dict[int, str]:
        """Map user ids to usernames; unknown ids get a placeholder"""
        ids = set(user_ids)
        if not ids:
            return {}
        found = {
            user.id: user.username
            for user in db.query(User).filter(User.id.in_(ids)).all()
        }
        return {user_id: found.get(user_id, f"User#{user_id}") for user_id in ids}
