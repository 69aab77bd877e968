"""
Quiz taking service

Drives the delivery state machine for one caller session: loads the state
from the session store, applies one event and writes the state back. On
completion the session state is cleared first, then the attempt is
recorded and achievements evaluated; if recording fails the state is put
back so the caller can retry.
"""

import logging
import random
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from quizhub.core.config import settings
from quizhub.core.exceptions import (
    InvalidStateException,
    NotFoundException,
    QuizHubException,
    ValidationException,
)
from quizhub.db.session_store import DeliverySessionStore
from quizhub.engine import delivery
from quizhub.engine.triggers import AchievementTriggerEvaluator
from quizhub.schemas.delivery import DeliveryState, QuizResult
from quizhub.services.achievements import AchievementService
from quizhub.services.attempts import AttemptStore
from quizhub.services.quizzes import QuizService
from quizhub.services.users import UserService
from quizhub.utils.clock import utc_now

logger = logging.getLogger(__name__)


class QuizTakingService:
    def __init__(
        self,
        db: Session,
        sessions: DeliverySessionStore,
        clock: Callable = utc_now,
        rng: Optional[random.Random] = None,
    ):
        self.db = db
        self.sessions = sessions
        self.clock = clock
        self.rng = rng

    async def start_quiz(
        self,
        session_id: str,
        quiz_id: int,
        practice: bool = False,
        user_id: Optional[int] = None,
    ):
        """Start a quiz, abandoning whatever this session had in progress"""
        quiz = QuizService.get_quiz(self.db, quiz_id)
        if practice and not quiz.practice_mode:
            raise ValidationException(
                "This quiz does not offer practice mode",
                details={"quiz_id": quiz_id},
                submitted={"practice": practice},
            )
        if user_id is not None and UserService.get_user(self.db, user_id) is None:
            raise NotFoundException("User", details={"user_id": user_id})

        questions = QuizService.list_questions(self.db, quiz_id)
        transition = delivery.start(
            quiz, questions, self.clock(), practice=practice, user_id=user_id, rng=self.rng
        )

        if await self.sessions.discard(session_id):
            logger.info("Quiz abandoned", extra={"session_id": session_id})
        await self.sessions.save(session_id, transition.state)

        logger.info(
            "Quiz started",
            extra={
                "quiz_id": quiz_id,
                "practice": practice,
                "shuffled": quiz.random_order,
                "one_page": quiz.one_page,
            },
        )
        return transition.output.model_copy(update={"session_id": session_id})

    async def current(self, session_id: str):
        """Re-render the current position"""
        state = await self._require_state(session_id)
        return delivery.present(state).model_copy(update={"session_id": session_id})

    async def submit_answer(self, session_id: str, answer: Optional[str]):
        return await self.handle(session_id, delivery.submit(answer))

    async def submit_all(self, session_id: str, answers: List[Optional[str]]):
        return await self.handle(session_id, delivery.submit_all(answers))

    async def advance(self, session_id: str):
        return await self.handle(session_id, delivery.advance())

    async def handle(self, session_id: str, event: delivery.Event):
        state = await self._require_state(session_id)
        transition = delivery.apply(state, event, self.clock())

        if transition.completed:
            # Claim the session before recording so a delivery is recorded once
            if not await self.sessions.discard(session_id):
                raise InvalidStateException("Quiz already completed for this session")
            try:
                result = self._record(transition)
            except QuizHubException:
                await self.sessions.save(session_id, state)
                raise
            return result.model_copy(update={"session_id": session_id})

        await self.sessions.save(session_id, transition.state)
        return transition.output.model_copy(update={"session_id": session_id})

    async def _require_state(self, session_id: Optional[str]) -> DeliveryState:
        state = await self.sessions.load(session_id) if session_id else None
        if state is None:
            raise InvalidStateException("No quiz in progress for this session")
        return state

    def _record(self, transition: delivery.Transition) -> QuizResult:
        """Persist the attempt, then evaluate achievements against it"""
        completion = transition.completion
        result = transition.output
        logger.info(
            "Quiz completed",
            extra={
                "quiz_id": completion.quiz_id,
                "score": completion.grade.score,
                "time_taken": completion.time_taken,
                "practice": completion.practice,
            },
        )
        if completion.user_id is None:
            return result

        store = AttemptStore(self.db)
        attempt = store.insert_attempt(
            user_id=completion.user_id,
            quiz_id=completion.quiz_id,
            score=completion.grade.score,
            total_questions=completion.grade.total_questions,
            time_taken=completion.time_taken,
            date_taken=completion.completed_at,
            is_practice=completion.practice,
        )

        evaluator = AchievementTriggerEvaluator(
            store,
            AchievementService(self.db),
            quiz_machine_threshold=settings.QUIZ_MACHINE_THRESHOLD,
        )
        outcomes = evaluator.evaluate_attempt(attempt)
        return result.model_copy(
            update={
                "attempt_id": attempt.id,
                "new_achievements": [o.achievement_type.value for o in outcomes if o.granted],
            }
        )
