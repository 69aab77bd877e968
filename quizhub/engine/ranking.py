"""
Rankings over recorded attempts.

Attempts are any objects exposing ``user_id``, ``quiz_id``, ``score``,
``total_questions``, ``time_taken``, ``date_taken`` and ``is_practice``
(ORM rows or plain records).

Every "best" or "top" selection uses one composite order: score
descending, then total questions descending, then time taken ascending,
then date taken descending (newer first).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

DEFAULT_LIMIT = 10
RECENT_WINDOW = timedelta(hours=24)

_EPOCH = datetime(1970, 1, 1)


def composite_key(attempt) -> Tuple[float, int, int, float]:
    """Sort key placing the best attempt first"""
    date_taken = attempt.date_taken.replace(tzinfo=None)
    return (
        -attempt.score,
        -attempt.total_questions,
        attempt.time_taken,
        -(date_taken - _EPOCH).total_seconds(),
    )


def rank(attempts: Iterable, limit: Optional[int] = None) -> List:
    ordered = sorted(attempts, key=composite_key)
    return ordered if limit is None else ordered[:limit]


def graded_only(attempts: Iterable) -> List:
    return [attempt for attempt in attempts if not attempt.is_practice]


def best_per_user(attempts: Iterable) -> List:
    """One attempt per user: the first under the composite order"""
    best: Dict[Any, Any] = {}
    for attempt in attempts:
        current = best.get(attempt.user_id)
        if current is None or composite_key(attempt) < composite_key(current):
            best[attempt.user_id] = attempt
    return list(best.values())


def top_attempt(attempts: Iterable):
    """Best graded attempt, or ``None`` when there is none"""
    ranked = rank(graded_only(attempts), limit=1)
    return ranked[0] if ranked else None


def all_time_top(attempts: Iterable, limit: int = DEFAULT_LIMIT) -> List:
    return rank(best_per_user(graded_only(attempts)), limit)


def last_day_top(
    attempts: Iterable,
    now: datetime,
    limit: int = DEFAULT_LIMIT,
    window: timedelta = RECENT_WINDOW,
) -> List:
    """Like :func:`all_time_top`, restricted to attempts inside the trailing window"""
    cutoff = now - window
    recent = [a for a in graded_only(attempts) if a.date_taken >= cutoff]
    return rank(best_per_user(recent), limit)


def recent_test_takers(attempts: Iterable, limit: int = DEFAULT_LIMIT) -> List:
    """Best attempt per user, newest first"""
    best = best_per_user(graded_only(attempts))
    return sorted(best, key=lambda a: a.date_taken, reverse=True)[:limit]


@dataclass(frozen=True)
class LeaderboardRow:
    quiz_id: int
    user_id: int
    attempt: Any

    @property
    def best_score(self) -> float:
        return self.attempt.score


def global_leaderboard(attempts: Sequence, limit: Optional[int] = None) -> List[LeaderboardRow]:
    """
    Best attempt for every (quiz, user) pair with a graded attempt, ordered
    across all quizzes by the composite order.
    """
    by_quiz: Dict[Any, List] = {}
    for attempt in graded_only(attempts):
        by_quiz.setdefault(attempt.quiz_id, []).append(attempt)

    best = [attempt for quiz_attempts in by_quiz.values() for attempt in best_per_user(quiz_attempts)]
    return [
        LeaderboardRow(quiz_id=attempt.quiz_id, user_id=attempt.user_id, attempt=attempt)
        for attempt in rank(best, limit)
    ]
