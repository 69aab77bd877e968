"""
Achievement trigger rules.

Rules only decide which achievements to request. Granting is delegated to
an awarder whose ``award(user_id, achievement_type)`` returns ``True`` for
a new grant and ``False`` when the user already holds the type, so rules
may fire on every qualifying event.
"""

import logging
from dataclasses import dataclass
from typing import List

from quizhub.core.exceptions import QuizHubException
from quizhub.engine import ranking
from quizhub.models.achievement import AchievementType

logger = logging.getLogger(__name__)

QUIZ_MACHINE_THRESHOLD = 10

AUTHOR_THRESHOLDS = (
    (1, AchievementType.AMATEUR_AUTHOR),
    (5, AchievementType.PROLIFIC_AUTHOR),
    (10, AchievementType.PRODIGIOUS_AUTHOR),
)


@dataclass(frozen=True)
class AwardOutcome:
    achievement_type: AchievementType
    granted: bool
    failed: bool = False


class AchievementTriggerEvaluator:
    """
    Evaluates achievement rules after a recorded attempt or a new quiz.

    ``ledger`` must provide ``count_graded_attempts(user_id)`` and
    ``list_attempts_by_quiz(quiz_id, practice_only)``; the attempt being
    evaluated has to be visible through it already.
    """

    def __init__(self, ledger, awarder, quiz_machine_threshold: int = QUIZ_MACHINE_THRESHOLD):
        self._ledger = ledger
        self._awarder = awarder
        self._quiz_machine_threshold = quiz_machine_threshold

    def attempt_triggers(self, attempt) -> List[AchievementType]:
        if attempt.is_practice:
            return [AchievementType.PRACTICE_MAKES_PERFECT]

        requested = []
        if self._ledger.count_graded_attempts(attempt.user_id) >= self._quiz_machine_threshold:
            requested.append(AchievementType.QUIZ_MACHINE)

        top = ranking.top_attempt(self._ledger.list_attempts_by_quiz(attempt.quiz_id, practice_only=False))
        if top is not None and top.user_id == attempt.user_id:
            requested.append(AchievementType.I_AM_THE_GREATEST)
        return requested

    @staticmethod
    def authoring_triggers(quizzes_created: int) -> List[AchievementType]:
        return [kind for threshold, kind in AUTHOR_THRESHOLDS if quizzes_created >= threshold]

    def evaluate_attempt(self, attempt) -> List[AwardOutcome]:
        return [self._request(attempt.user_id, kind) for kind in self.attempt_triggers(attempt)]

    def evaluate_authoring(self, user_id: int, quizzes_created: int) -> List[AwardOutcome]:
        return [self._request(user_id, kind) for kind in self.authoring_triggers(quizzes_created)]

    def _request(self, user_id: int, kind: AchievementType) -> AwardOutcome:
        # A failed award must not block the caller's result
        try:
            granted = self._awarder.award(user_id, kind)
        except QuizHubException as exc:
            logger.warning(
                f"Achievement award failed: {exc.message}",
                extra={"user_id": user_id, "achievement_type": kind.value},
                exc_info=True,
            )
            return AwardOutcome(achievement_type=kind, granted=False, failed=True)

        if granted:
            logger.info(
                "Achievement granted",
                extra={"user_id": user_id, "achievement_type": kind.value},
            )
        return AwardOutcome(achievement_type=kind, granted=granted)
