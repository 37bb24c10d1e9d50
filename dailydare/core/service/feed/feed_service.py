import uuid
from typing import List, Optional

import redis.asyncio as redis

from dailydare.core.service.dare.cache.profile_store import ProfileStore
from dailydare.core.service.dare.models.results import FailureKind
from dailydare.core.service.feed.cache.post_store import PostStore
from dailydare.core.service.feed.models import CommunityPost, DoubleDareResult, PostedDare, PostLocation
from dailydare.core.exceptions.base import ProfileConflictError
from dailydare.infra.repository.dare_activity_repository import ActivityType
from dailydare.core.logger.logger import get_logger
from dailydare.infra.config.settings import settings

logger = get_logger(__name__)


class FeedService:
    """Community proof posts and the Double Dare challenge"""

    def __init__(
        self,
        post_store: PostStore,
        profile_store: ProfileStore,
        activity_repository=None,
        max_retries: Optional[int] = None
    ):
        self.posts = post_store
        self.profiles = profile_store
        self.activity_repository = activity_repository
        self.double_dare_cost = settings.DOUBLE_DARE_COST
        self.page_size = settings.FEED_PAGE_SIZE
        self.max_retries = settings.PROFILE_UPDATE_MAX_RETRIES if max_retries is None else max_retries

    async def create_post(
        self,
        user_id: str,
        dare: PostedDare,
        image_url: Optional[str] = None,
        location: Optional[PostLocation] = None
    ) -> CommunityPost:
        """Publish a post. Scoring is handled by dare completion, not here."""
        profile = await self.profiles.get_profile(user_id)
        display_name = (profile.display_name if profile else None) or user_id[:8]

        post = CommunityPost(
            post_id=uuid.uuid4().hex,
            user_id=user_id,
            user_display_name=display_name,
            dare_id=dare.dare_id,
            dare_title=dare.title,
            dare_difficulty=dare.difficulty,
            is_bonus=dare.is_bonus,
            tags=dare.tags,
            image_url=image_url,
            location=location,
            points_awarded=dare.points,
        )
        await self.posts.save(post)

        logger.info(
            "Community post created",
            extra={"user_id": user_id, "post_id": post.post_id, "dare_id": dare.dare_id}
        )
        return post

    async def list_posts(self, limit: Optional[int] = None) -> List[CommunityPost]:
        return await self.posts.list_recent(limit or self.page_size)

    async def _apply_double_dare(self, user_id: str, post_id: str) -> DoubleDareResult:
        profile_key = self.profiles.key_for(user_id)
        post_key = self.posts.key_for(post_id)

        for attempt in range(1, self.max_retries + 1):
            async with self.profiles.redis.pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(profile_key, post_key)
                    profile_data = await pipe.get(profile_key)
                    post_data = await pipe.get(post_key)

                    post = self.posts.deserialize(post_data) if post_data else None
                    if not profile_data or post is None:
                        await pipe.unwatch()
                        return DoubleDareResult(
                            success=False,
                            failure=FailureKind.NOT_FOUND,
                            message="Post not found." if profile_data else "User profile not found.",
                            post_id=post_id
                        )

                    profile = self.profiles.deserialize(user_id, profile_data)
                    if profile.score < self.double_dare_cost:
                        await pipe.unwatch()
                        return DoubleDareResult(
                            success=False,
                            failure=FailureKind.INSUFFICIENT_CURRENCY,
                            message=f"You need {self.double_dare_cost} points to Double Dare someone.",
                            post_id=post_id,
                            double_dares=post.double_dares,
                            score=profile.score
                        )

                    profile = profile.model_copy(update={
                        "score": profile.score - self.double_dare_cost,
                        "version": profile.version + 1,
                    })
                    post = post.model_copy(update={"double_dares": post.double_dares + 1})

                    pipe.multi()
                    self.profiles.queue_write(pipe, profile)
                    pipe.set(post_key, self.posts.serialize(post))
                    await pipe.execute()

                    return DoubleDareResult(
                        success=True,
                        message=f"You challenged {post.user_display_name} for {self.double_dare_cost} points!",
                        post_id=post_id,
                        double_dares=post.double_dares,
                        score=profile.score
                    )

                except redis.WatchError:
                    logger.info(
                        "Double dare raced another write, retrying",
                        extra={"user_id": user_id, "post_id": post_id, "attempt": attempt}
                    )
                    continue

        raise ProfileConflictError(user_id, self.max_retries)

    async def double_dare(self, user_id: str, post_id: str) -> DoubleDareResult:
        """Spend points to challenge a post's author; one atomic write for both documents"""
        try:
            result = await self._apply_double_dare(user_id, post_id)
        except (redis.RedisError, ProfileConflictError) as e:
            logger.error(
                "Double dare failed on storage error",
                extra={"user_id": user_id, "post_id": post_id, "error": str(e)}
            )
            return DoubleDareResult(
                success=False,
                failure=FailureKind.TRANSIENT,
                message="Could not process the dare. Please try again.",
                post_id=post_id
            )

        logger.info(
            "Double dare processed",
            extra={"user_id": user_id, "post_id": post_id, "success": result.success, "failure": result.failure}
        )
        if self.activity_repository:
            try:
                await self.activity_repository.log_activity(
                    user_id=user_id,
                    activity_type=ActivityType.DOUBLE_DARE,
                    success=result.success,
                    dare_id=post_id,
                    points_delta=-self.double_dare_cost if result.success else 0,
                    failure_reason=result.failure.value if result.failure else None
                )
            except Exception as db_error:
                logger.error(f"Failed to log double dare activity: {db_error}", extra={"user_id": user_id})
        return result
