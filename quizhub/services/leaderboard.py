"""Leaderboard service: per-quiz summaries and the global leaderboard"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from quizhub.core.config import settings
from quizhub.engine import ranking
from quizhub.models import Quiz
from quizhub.schemas.leaderboard import LeaderboardEntry, QuizSummary, RankedAttempt
from quizhub.services.attempts import AttemptStore
from quizhub.services.quizzes import QuizService
from quizhub.services.users import UserService
from quizhub.utils.clock import utc_now


class LeaderboardService:
    @staticmethod
    def get_quiz_summary(db: Session, quiz_id: int, now: Optional[datetime] = None) -> QuizSummary:
        """All-time top, last-day top and recent takers for one quiz"""
        quiz = QuizService.get_quiz(db, quiz_id)
        attempts = AttemptStore(db).list_attempts_by_quiz(quiz_id, practice_only=False)
        now = now or utc_now()
        limit = settings.SUMMARY_LIMIT

        all_time = ranking.all_time_top(attempts, limit)
        last_day = ranking.last_day_top(
            attempts, now, limit, window=timedelta(hours=settings.RECENT_WINDOW_HOURS)
        )
        recent = ranking.recent_test_takers(attempts, limit)

        usernames = UserService.get_usernames(db, (a.user_id for a in all_time + last_day + recent))
        return QuizSummary(
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            all_time_top=LeaderboardService._ranked(all_time, usernames),
            last_day_top=LeaderboardService._ranked(last_day, usernames),
            recent_test_takers=LeaderboardService._ranked(recent, usernames),
            total_attempts=len(attempts),
            average_score=sum(a.score for a in attempts) / len(attempts) if attempts else None,
        )

    @staticmethod
    def get_leaderboard(db: Session, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        """Best graded attempt of every (quiz, user) pair, best first"""
        rows = ranking.global_leaderboard(AttemptStore(db).list_graded_attempts(), limit)
        if not rows:
            return []

        usernames = UserService.get_usernames(db, (row.user_id for row in rows))
        quiz_ids = {row.quiz_id for row in rows}
        titles: Dict[int, str] = {
            quiz.id: quiz.title
            for quiz in db.query(Quiz).filter(Quiz.id.in_(quiz_ids)).all()
        }
        return [
            LeaderboardEntry(
                rank=position,
                quiz_id=row.quiz_id,
                quiz_title=titles.get(row.quiz_id, f"Quiz#{row.quiz_id}"),
                user_id=row.user_id,
                username=usernames[row.user_id],
                best_score=row.best_score,
                total_questions=row.attempt.total_questions,
                time_taken=row.attempt.time_taken,
                date_taken=row.attempt.date_taken,
            )
            for position, row in enumerate(rows, start=1)
        ]

    @staticmethod
    def _ranked(attempts, usernames: Dict[int, str]) -> List[RankedAttempt]:
        return [
            RankedAttempt(
                attempt_id=attempt.id,
                user_id=attempt.user_id,
                username=usernames[attempt.user_id],
                score=attempt.score,
                total_questions=attempt.total_questions,
                time_taken=attempt.time_taken,
                date_taken=attempt.date_taken,
            )
            for attempt in attempts
        ]
