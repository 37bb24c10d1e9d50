from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from dailydare.core.service.dare.models.dare import AssignedDare


class AssignmentState(str, Enum):
    UNASSIGNED = "unassigned"
    ASSIGNED_TODAY = "assigned_today"
    STALE = "stale"


class UserProfile(BaseModel):
    """Per-user economy state, stored as one document"""
    user_id: str
    display_name: Optional[str] = None
    score: int = Field(default=0, ge=0)
    reroll_tokens: int = Field(default=0, ge=0)
    dares_completed_count: int = Field(default=0, ge=0)
    interests: List[str] = Field(default_factory=list)
    daily_dares: List[AssignedDare] = Field(default_factory=list)
    last_dare_assignment: Optional[date] = None
    tokens_reset_on: Optional[date] = None
    onboarding_complete: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = Field(default=0, ge=0, description="Bumped by the store on every write")

    def assignment_state(self, today: date) -> AssignmentState:
        """Single transition rule for the daily set.

        Dates are compared as dates, never as strings or timestamps.
        """
        if not self.daily_dares:
            return AssignmentState.UNASSIGNED
        if self.last_dare_assignment == today:
            return AssignmentState.ASSIGNED_TODAY
        return AssignmentState.STALE

    def find_dare(self, dare_id: str) -> Optional[int]:
        for index, dare in enumerate(self.daily_dares):
            if dare.dare_id == dare_id:
                return index
        return None

    def assigned_ids(self) -> set:
        return {dare.dare_id for dare in self.daily_dares}


class OnboardingRequest(BaseModel):
    interests: List[str] = Field(default_factory=list, max_length=10, description="Topic tags, e.g. Social, Fitness")
    display_name: Optional[str] = Field(None, max_length=50)
