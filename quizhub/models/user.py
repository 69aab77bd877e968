"""
User model for QuizHub
"""

from sqlalchemy import Column, DateTime, Integer, String

from quizhub.core.database import Base
from quizhub.utils.clock import utc_now


class User(Base):
    """User model; accounts are managed elsewhere, only identity is kept here"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=utc_now)
