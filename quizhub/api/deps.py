"""
Shared endpoint dependencies

Caller identity arrives in headers set by the layer in front of the API:
``X-User-ID`` for an authenticated user and ``X-Session-ID`` for the
caller's quiz-taking session.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from quizhub.core.database import get_db
from quizhub.core.exceptions import AuthenticationException
from quizhub.db.session_store import DeliverySessionStore, sessions
from quizhub.services.quiz_taking import QuizTakingService


def get_session_store() -> DeliverySessionStore:
    return sessions


def get_optional_user_id(x_user_id: Optional[int] = Header(default=None)) -> Optional[int]:
    return x_user_id


def get_current_user_id(user_id: Optional[int] = Depends(get_optional_user_id)) -> int:
    if user_id is None:
        raise AuthenticationException("This operation needs a signed-in user")
    return user_id


def get_session_id(x_session_id: Optional[str] = Header(default=None)) -> Optional[str]:
    return x_session_id


def get_quiz_taking_service(
    db: Session = Depends(get_db),
    store: DeliverySessionStore = Depends(get_session_store),
) -> QuizTakingService:
    return QuizTakingService(db, store)
