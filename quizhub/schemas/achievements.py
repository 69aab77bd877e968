"""Achievement schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from quizhub.models.achievement import AchievementType


class AchievementResponse(BaseModel):
    id: int
    user_id: int
    achievement_type: AchievementType
    display_name: str
    description: Optional[str]
    date_earned: datetime


class AchievementTypeResponse(BaseModel):
    type: AchievementType
    display_name: str
    description: str
