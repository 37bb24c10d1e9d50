"""Result objects returned by economy operations.

Failures are values, not exceptions, so callers can render the message
directly and tests can assert on the exact failure kind.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from dailydare.core.service.dare.models.dare import AssignedDare


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_COMPLETED = "already_completed"
    INSUFFICIENT_CURRENCY = "insufficient_currency"
    CATALOG_EXHAUSTED = "catalog_exhausted"
    TRANSIENT = "transient"


class RerollPayment(str, Enum):
    TOKEN = "token"
    POINTS = "points"


class EconomyResult(BaseModel):
    success: bool
    message: str
    failure: Optional[FailureKind] = None


class AssignmentResult(EconomyResult):
    dares: List[AssignedDare] = []
    assigned_date: Optional[date] = None
    reassigned: bool = False
    reroll_tokens: Optional[int] = None


class CompletionResult(EconomyResult):
    dare_id: Optional[str] = None
    is_bonus: bool = False
    points_awarded: int = 0
    score: Optional[int] = None
    dares_completed_count: Optional[int] = None


class RerollResult(EconomyResult):
    new_dare: Optional[AssignedDare] = None
    remaining_tokens: Optional[int] = None
    score: Optional[int] = None
    paid_with: Optional[RerollPayment] = None


class PurchaseResult(EconomyResult):
    new_token_count: Optional[int] = None
    score: Optional[int] = None
