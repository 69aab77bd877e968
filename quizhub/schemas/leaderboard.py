"""Leaderboard schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class RankedAttempt(BaseModel):
    attempt_id: int
    user_id: int
    username: str
    score: float
    total_questions: int
    time_taken: int
    date_taken: datetime


class QuizSummary(BaseModel):
    quiz_id: int
    quiz_title: str
    all_time_top: List[RankedAttempt]
    last_day_top: List[RankedAttempt]
    recent_test_takers: List[RankedAttempt]
    total_attempts: int
    average_score: Optional[float]


class LeaderboardEntry(BaseModel):
    rank: int
    quiz_id: int
    quiz_title: str
    user_id: int
    username: str
    best_score: float
    total_questions: int
    time_taken: int
    date_taken: datetime
