from typing import List

from fastapi import APIRouter, Depends, Query, status

from dailydare.api.controller.dare.dare_controller import raise_for_failure
from dailydare.api.middleware.authentication.jwt_bearer import get_current_user_id
from dailydare.api.models.request_models import CreatePostRequest
from dailydare.core.dependencies import get_feed_service
from dailydare.core.exceptions.handler import ServiceErrorCode
from dailydare.core.service.feed.feed_service import FeedService
from dailydare.core.service.feed.models import CommunityPost, DoubleDareResult

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=List[CommunityPost])
async def list_posts(
    limit: int = Query(20, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: FeedService = Depends(get_feed_service)
) -> List[CommunityPost]:
    return await service.list_posts(limit)


@router.post("", response_model=CommunityPost, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostRequest,
    user_id: str = Depends(get_current_user_id),
    service: FeedService = Depends(get_feed_service)
) -> CommunityPost:
    return await service.create_post(user_id, request.dare, request.image_url, request.location)


@router.post("/{post_id}/double-dare", response_model=DoubleDareResult)
async def double_dare(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FeedService = Depends(get_feed_service)
) -> DoubleDareResult:
    """Challenge a post's author; costs the caller points"""
    result = await service.double_dare(user_id, post_id)
    raise_for_failure(result, ServiceErrorCode.POST_NOT_FOUND)
    return result
