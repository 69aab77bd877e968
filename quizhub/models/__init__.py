"""
QuizHub Models Package
"""

from quizhub.models.achievement import Achievement, AchievementType
from quizhub.models.quiz import Question, QuestionType, Quiz, QuizAttempt
from quizhub.models.user import User

__all__ = [
    "User",
    "Quiz", "Question", "QuizAttempt", "QuestionType",
    "Achievement", "AchievementType",
]
