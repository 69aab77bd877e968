"""
Quiz endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from quizhub.api.deps import get_current_user_id
from quizhub.core.database import get_db
from quizhub.engine.delivery import public_question
from quizhub.schemas.leaderboard import QuizSummary
from quizhub.schemas.quiz import (
    QuizCreate,
    QuizCreateResponse,
    QuizDetailResponse,
    QuizHistoryResponse,
    QuizResponse,
)
from quizhub.services.leaderboard import LeaderboardService
from quizhub.services.quizzes import QuizService

router = APIRouter()


@router.get("/", response_model=List[QuizResponse])
async def get_quizzes(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Get all quizzes with pagination"""
    return QuizService.get_quizzes(db, skip, limit)


@router.post("/", response_model=QuizCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    quiz_create: QuizCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a quiz with its questions"""
    quiz, outcomes = QuizService.create_quiz(db, quiz_create, user_id)
    return QuizCreateResponse(
        quiz=QuizResponse.model_validate(quiz),
        new_achievements=[o.achievement_type.value for o in outcomes if o.granted],
    )


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(quiz_id: int, db: Session = Depends(get_db)):
    """Get specific quiz by ID, without answers"""
    quiz = QuizService.get_quiz(db, quiz_id)
    detail = QuizResponse.model_validate(quiz).model_dump()
    questions = [public_question(q) for q in QuizService.list_questions(db, quiz_id)]
    return QuizDetailResponse(**detail, questions=questions)


@router.get("/{quiz_id}/summary", response_model=QuizSummary)
async def get_quiz_summary(quiz_id: int, db: Session = Depends(get_db)):
    """Top performers and recent takers for a quiz"""
    return LeaderboardService.get_quiz_summary(db, quiz_id)


@router.get("/{quiz_id}/history", response_model=QuizHistoryResponse)
async def get_quiz_history(
    quiz_id: int,
    mode: str = Query("all"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """The caller's own attempts on a quiz"""
    return QuizService.get_history(db, user_id, quiz_id, mode)
