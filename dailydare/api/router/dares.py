"""Daily dare, reroll, token and Overtime routes."""

from typing import Optional

from fastapi import APIRouter, Depends

from dailydare.api.controller.dare.dare_controller import DareController
from dailydare.api.middleware.authentication.jwt_bearer import get_current_user_id
from dailydare.api.models.request_models import (
    BonusCompleteRequest,
    BonusGenerateRequest,
    DailyDaresResponse,
)
from dailydare.core.dependencies import get_dare_controller
from dailydare.core.service.dare.models.dare import BonusDare
from dailydare.core.service.dare.models.results import CompletionResult, PurchaseResult, RerollResult

router = APIRouter(
    prefix="/dares",
    tags=["dares"],
    responses={
        401: {"description": "Unauthorized"},
        429: {"description": "Too Many Requests"},
        503: {"description": "Storage temporarily unavailable"}
    }
)


@router.get("/daily", response_model=DailyDaresResponse, summary="Get today's dares")
async def get_daily_dares(
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> DailyDaresResponse:
    """
    Return today's Easy, Medium and Hard dares, assigning them on the first
    call of the day. Reroll tokens refill when the day changes.
    """
    return await controller.get_daily_dares(user_id)


@router.post("/tokens", response_model=PurchaseResult, summary="Buy a reroll token")
async def purchase_reroll_token(
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> PurchaseResult:
    return await controller.purchase_reroll_token(user_id)


@router.post("/bonus", response_model=BonusDare, summary="Generate an Overtime dare")
async def generate_bonus_dare(
    request: Optional[BonusGenerateRequest] = None,
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> BonusDare:
    return await controller.generate_bonus_dare(user_id, request.history if request else [])


@router.post("/bonus/complete", response_model=CompletionResult, summary="Complete an Overtime dare")
async def complete_bonus_dare(
    request: BonusCompleteRequest,
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> CompletionResult:
    return await controller.complete_bonus_dare(user_id, request)


@router.post("/{dare_id}/complete", response_model=CompletionResult, summary="Complete one of today's dares")
async def complete_dare(
    dare_id: str,
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> CompletionResult:
    return await controller.complete_dare(user_id, dare_id)


@router.post("/{dare_id}/reroll", response_model=RerollResult, summary="Reroll one of today's dares")
async def reroll_dare(
    dare_id: str,
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> RerollResult:
    """Spends a free token if available, otherwise points. Nothing is spent on failure."""
    return await controller.reroll_dare(user_id, dare_id)
