"""
Achievement model for QuizHub
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint

from quizhub.core.database import Base
from quizhub.utils.clock import utc_now


class AchievementType(str, enum.Enum):
    """Achievement types"""
    AMATEUR_AUTHOR = "amateur_author"
    PROLIFIC_AUTHOR = "prolific_author"
    PRODIGIOUS_AUTHOR = "prodigious_author"
    QUIZ_MACHINE = "quiz_machine"
    I_AM_THE_GREATEST = "i_am_the_greatest"
    PRACTICE_MAKES_PERFECT = "practice_makes_perfect"

    @property
    def display_name(self) -> str:
        return _CATALOGUE[self][0]

    @property
    def default_description(self) -> str:
        return _CATALOGUE[self][1]


_CATALOGUE = {
    AchievementType.AMATEUR_AUTHOR: ("Amateur Author", "Created your first quiz!"),
    AchievementType.PROLIFIC_AUTHOR: ("Prolific Author", "Created 5 quizzes!"),
    AchievementType.PRODIGIOUS_AUTHOR: ("Prodigious Author", "Created 10 quizzes!"),
    AchievementType.QUIZ_MACHINE: ("Quiz Machine", "Took 10 quizzes!"),
    AchievementType.I_AM_THE_GREATEST: ("I am the Greatest", "Achieved the highest score on a quiz!"),
    AchievementType.PRACTICE_MAKES_PERFECT: ("Practice Makes Perfect", "Took a quiz in practice mode!"),
}


class Achievement(Base):
    """Earned achievement; at most one row per user and type"""
    __tablename__ = "achievements"
    __table_args__ = (UniqueConstraint("user_id", "achievement_type", name="uq_user_achievement"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    achievement_type = Column(Enum(AchievementType), nullable=False)
    description = Column(String, nullable=True)

    date_earned = Column(DateTime, default=utc_now)
