"""
Achievement endpoints
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizhub.core.database import get_db
from quizhub.core.exceptions import NotFoundException
from quizhub.models import AchievementType
from quizhub.schemas.achievements import AchievementResponse, AchievementTypeResponse
from quizhub.services.achievements import AchievementService
from quizhub.services.users import UserService

router = APIRouter()


@router.get("/types", response_model=List[AchievementTypeResponse])
async def get_achievement_types():
    """Every achievement that can be earned"""
    return [
        AchievementTypeResponse(
            type=achievement_type,
            display_name=achievement_type.display_name,
            description=achievement_type.default_description,
        )
        for achievement_type in AchievementType
    ]


@router.get("/user/{user_id}", response_model=List[AchievementResponse])
async def get_user_achievements(user_id: int, db: Session = Depends(get_db)):
    """Achievements earned by a user, newest first"""
    if UserService.get_user(db, user_id) is None:
        raise NotFoundException("User", details={"user_id": user_id})
    return [
        AchievementResponse(
            id=achievement.id,
            user_id=achievement.user_id,
            achievement_type=achievement.achievement_type,
            display_name=achievement.achievement_type.display_name,
            description=achievement.description,
            date_earned=achievement.date_earned,
        )
        for achievement in AchievementService(db).list_for_user(user_id)
    ]
