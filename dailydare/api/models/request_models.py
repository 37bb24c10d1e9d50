"""
Request and response bodies for the HTTP API
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from dailydare.core.service.dare.models.dare import AssignedDare, Difficulty
from dailydare.core.service.feed.models import PostedDare, PostLocation


class BonusGenerateRequest(BaseModel):
    history: List[str] = Field(default_factory=list, max_length=50, description="Titles already seen this session")


class BonusCompleteRequest(BaseModel):
    dare_id: str = Field(..., min_length=1, max_length=64)
    difficulty: Difficulty


class CreatePostRequest(BaseModel):
    dare: PostedDare
    image_url: Optional[str] = Field(None, max_length=2048)
    location: Optional[PostLocation] = None


class DailyDaresResponse(BaseModel):
    dares: List[AssignedDare]
    assigned_date: str
    reroll_tokens: int
    score: int
    onboarding_complete: bool
