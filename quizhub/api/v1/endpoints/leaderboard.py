"""
Leaderboard endpoints
Handles the global leaderboard across all quizzes
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quizhub.core.database import get_db
from quizhub.schemas.leaderboard import LeaderboardEntry
from quizhub.services.leaderboard import LeaderboardService

router = APIRouter()


@router.get("/", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Get global leaderboard"""
    return LeaderboardService.get_leaderboard(db, limit)
