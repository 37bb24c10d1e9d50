from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from dailydare.core.service.dare.models.dare import Difficulty
from dailydare.core.service.dare.models.results import EconomyResult


class PostLocation(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None


class PostedDare(BaseModel):
    """The dare a post shows proof for"""
    dare_id: str
    title: str = "Daily Challenge"
    difficulty: Difficulty = Difficulty.MEDIUM
    points: int = Field(default=0, ge=0)
    is_bonus: bool = False
    tags: List[str] = Field(default_factory=list)


class CommunityPost(BaseModel):
    post_id: str
    user_id: str
    user_display_name: str
    dare_id: str
    dare_title: str
    dare_difficulty: Difficulty
    is_bonus: bool = False
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    location: Optional[PostLocation] = None
    points_awarded: int = 0
    likes: int = 0
    double_dares: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DoubleDareResult(EconomyResult):
    post_id: Optional[str] = None
    double_dares: Optional[int] = None
    score: Optional[int] = None
