"""
Quiz taking endpoints
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from quizhub.api.deps import get_optional_user_id, get_quiz_taking_service, get_session_id
from quizhub.engine import delivery
from quizhub.schemas.delivery import (
    AllAnswersSubmission,
    AnswerSubmission,
    Presentation,
    TakeAction,
)
from quizhub.services.quiz_taking import QuizTakingService

router = APIRouter()


@router.get("/current", response_model=Presentation)
async def current_question(
    session_id: Optional[str] = Depends(get_session_id),
    service: QuizTakingService = Depends(get_quiz_taking_service),
):
    """Show the current question again"""
    return await service.current(session_id)


@router.post("/actions", response_model=Presentation)
async def take_action(
    body: TakeAction,
    session_id: Optional[str] = Depends(get_session_id),
    service: QuizTakingService = Depends(get_quiz_taking_service),
):
    """Apply a raw page action; unknown actions re-render the current question"""
    event = delivery.Event(action=body.action, answer=body.answer, answers=body.answers)
    return await service.handle(session_id, event)


@router.post("/submit", response_model=Presentation)
async def submit_answer(
    body: AnswerSubmission,
    session_id: Optional[str] = Depends(get_session_id),
    service: QuizTakingService = Depends(get_quiz_taking_service),
):
    """Answer the current question"""
    return await service.submit_answer(session_id, body.answer)


@router.post("/submit-all", response_model=Presentation)
async def submit_all_answers(
    body: AllAnswersSubmission,
    session_id: Optional[str] = Depends(get_session_id),
    service: QuizTakingService = Depends(get_quiz_taking_service),
):
    """Answer every question of a one-page quiz"""
    return await service.submit_all(session_id, body.answers)


@router.post("/advance", response_model=Presentation)
async def advance(
    session_id: Optional[str] = Depends(get_session_id),
    service: QuizTakingService = Depends(get_quiz_taking_service),
):
    """Move past the feedback of an immediately corrected question"""
    return await service.advance(session_id)


@router.post("/{quiz_id}", response_model=Presentation)
async def start_quiz(
    quiz_id: int,
    practice: bool = Query(False),
    session_id: Optional[str] = Depends(get_session_id),
    user_id: Optional[int] = Depends(get_optional_user_id),
    service: QuizTakingService = Depends(get_quiz_taking_service),
):
    """Start a quiz; any quiz already in progress for this session is abandoned"""
    return await service.start_quiz(
        session_id or str(uuid.uuid4()), quiz_id, practice=practice, user_id=user_id
    )
