"""Dare controller: maps economy results onto HTTP responses."""

from typing import List, Optional

from fastapi import status

from dailydare.core.service.dare.economy_service import DareEconomyService
from dailydare.core.service.dare.models.dare import BonusDare
from dailydare.core.service.dare.models.profile import UserProfile
from dailydare.core.service.dare.models.results import (
    CompletionResult,
    EconomyResult,
    FailureKind,
    PurchaseResult,
    RerollResult,
)
from dailydare.core.service.bonus.bonus_dare_service import BONUS_POINTS, BonusDareService
from dailydare.core.exceptions.base import BonusDareGenerationError
from dailydare.core.exceptions.handler import ServiceError, ServiceErrorCode
from dailydare.api.models.request_models import BonusCompleteRequest, DailyDaresResponse
from dailydare.core.logger.logger import logger


FAILURE_STATUS = {
    FailureKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, ServiceErrorCode.DARE_NOT_FOUND),
    FailureKind.ALREADY_COMPLETED: (status.HTTP_409_CONFLICT, ServiceErrorCode.ALREADY_COMPLETED),
    FailureKind.INSUFFICIENT_CURRENCY: (status.HTTP_402_PAYMENT_REQUIRED, ServiceErrorCode.INSUFFICIENT_CURRENCY),
    FailureKind.CATALOG_EXHAUSTED: (status.HTTP_409_CONFLICT, ServiceErrorCode.CATALOG_EXHAUSTED),
    FailureKind.TRANSIENT: (status.HTTP_503_SERVICE_UNAVAILABLE, ServiceErrorCode.SERVICE_UNAVAILABLE),
}


def raise_for_failure(result: EconomyResult, not_found_code: str = ServiceErrorCode.DARE_NOT_FOUND) -> None:
    """Raise the ServiceError matching a failed result; successful results pass through"""
    if result.success:
        return

    status_code, code = FAILURE_STATUS[result.failure]
    if result.failure == FailureKind.NOT_FOUND:
        code = not_found_code

    raise ServiceError(
        code=code,
        message=result.message,
        status_code=status_code,
        details=result.model_dump(mode="json", exclude={"success", "message"}, exclude_none=True)
    )


class DareController:
    """Controller for daily dare and Overtime operations."""

    def __init__(self, economy_service: DareEconomyService, bonus_service: Optional[BonusDareService] = None):
        self.economy = economy_service
        self.bonus = bonus_service

    async def get_daily_dares(self, user_id: str) -> DailyDaresResponse:
        result = await self.economy.assign_daily_dares(user_id)
        raise_for_failure(result, ServiceErrorCode.USER_NOT_FOUND)

        profile = await self.economy.get_profile(user_id)
        return DailyDaresResponse(
            dares=result.dares,
            assigned_date=result.assigned_date.isoformat(),
            reroll_tokens=profile.reroll_tokens if profile else result.reroll_tokens,
            score=profile.score if profile else 0,
            onboarding_complete=profile.onboarding_complete if profile else False
        )

    async def complete_dare(self, user_id: str, dare_id: str) -> CompletionResult:
        """Awards the assigned dare's own points"""
        if self.economy.is_bonus_dare(dare_id):
            raise ServiceError(
                code=ServiceErrorCode.INVALID_INPUT,
                message="Overtime dares are completed through the bonus endpoint.",
                status_code=status.HTTP_400_BAD_REQUEST
            )

        result = await self.economy.complete_dare(user_id, dare_id)
        raise_for_failure(result)
        return result

    async def reroll_dare(self, user_id: str, dare_id: str) -> RerollResult:
        result = await self.economy.reroll_dare(user_id, dare_id)
        raise_for_failure(result)
        return result

    async def purchase_reroll_token(self, user_id: str) -> PurchaseResult:
        result = await self.economy.purchase_reroll_token(user_id)
        raise_for_failure(result, ServiceErrorCode.USER_NOT_FOUND)
        return result

    async def generate_bonus_dare(self, user_id: str, history: List[str]) -> BonusDare:
        try:
            return await self.bonus.generate(history)
        except BonusDareGenerationError as e:
            logger.error(f"Overtime dare generation failed: {e}", extra={"user_id": user_id})
            raise ServiceError(
                code=ServiceErrorCode.AI_GENERATION_FAILED,
                message="The AI could not generate a dare. Please try again.",
                status_code=status.HTTP_502_BAD_GATEWAY,
                details={"reason": str(e)}
            )

    async def complete_bonus_dare(self, user_id: str, request: BonusCompleteRequest) -> CompletionResult:
        """Points come from the tier table, never from the client"""
        if not self.economy.is_bonus_dare(request.dare_id):
            raise ServiceError(
                code=ServiceErrorCode.INVALID_INPUT,
                message="Not an Overtime dare id.",
                status_code=status.HTTP_400_BAD_REQUEST
            )

        result = await self.economy.complete_dare(
            user_id,
            request.dare_id,
            points=BONUS_POINTS[request.difficulty],
            is_bonus=True
        )
        raise_for_failure(result, ServiceErrorCode.USER_NOT_FOUND)
        return result

    async def get_profile(self, user_id: str) -> UserProfile:
        profile = await self.economy.get_profile(user_id)
        if profile is None:
            raise ServiceError(
                code=ServiceErrorCode.USER_NOT_FOUND,
                message="User profile not found.",
                status_code=status.HTTP_404_NOT_FOUND
            )
        return profile

    async def complete_onboarding(self, user_id: str, interests: List[str], display_name: Optional[str]) -> UserProfile:
        return await self.economy.complete_onboarding(user_id, interests, display_name)
