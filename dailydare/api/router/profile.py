from fastapi import APIRouter, Depends

from dailydare.api.controller.dare.dare_controller import DareController
from dailydare.api.middleware.authentication.jwt_bearer import get_current_user_id
from dailydare.core.dependencies import get_dare_controller
from dailydare.core.service.dare.models.profile import OnboardingRequest, UserProfile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserProfile)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> UserProfile:
    return await controller.get_profile(user_id)


@router.post("/onboarding", response_model=UserProfile)
async def complete_onboarding(
    request: OnboardingRequest,
    user_id: str = Depends(get_current_user_id),
    controller: DareController = Depends(get_dare_controller)
) -> UserProfile:
    """Save interests used to personalize dare selection"""
    return await controller.complete_onboarding(user_id, request.interests, request.display_name)
