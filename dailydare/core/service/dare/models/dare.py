from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


# Assignment order for a day's set
DIFFICULTY_ORDER: List[Difficulty] = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


class DareTemplate(BaseModel):
    """Catalog entry. Owned by the catalog, never embedded in a profile."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Catalog document id")
    title: str
    description: str
    points: int = Field(..., gt=0, description="Reward for completing the dare")
    difficulty: Difficulty
    tags: List[str] = Field(default_factory=list, description="Topic tags used for personalization")
    proof_required: bool = Field(default=False, description="Informational; not enforced")

    def matches_interests(self, interests) -> bool:
        """True if any tag overlaps the given interests (case-insensitive)"""
        wanted = {i.lower() for i in interests}
        return any(tag.lower() in wanted for tag in self.tags)


class AssignedDare(BaseModel):
    """Snapshot of a template taken at assignment time.

    Catalog edits after assignment never reach this copy.
    """
    dare_id: str
    title: str
    description: str
    points: int
    difficulty: Difficulty
    assigned_date: date
    completed: bool = False

    @classmethod
    def from_template(cls, template: DareTemplate, assigned_date: date) -> "AssignedDare":
        return cls(
            dare_id=template.id,
            title=template.title,
            description=template.description,
            points=template.points,
            difficulty=template.difficulty,
            assigned_date=assigned_date,
            completed=False,
        )


class BonusDare(BaseModel):
    """Overtime dare produced on demand; never stored in the daily list"""
    dare_id: str = Field(..., description="Synthetic id, e.g. ai_1718000000000")
    title: str
    description: str
    difficulty: Difficulty
    points: int
    is_bonus: bool = True
    tags: List[str] = Field(default_factory=lambda: ["AI Dare", "Overtime"])
    model_name: Optional[str] = None
