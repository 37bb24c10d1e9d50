import json
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

import redis.asyncio as redis
from pydantic import ValidationError

from dailydare.core.service.dare.models.profile import UserProfile
from dailydare.core.exceptions.base import ProfileConflictError, ProfileCorruptedError
from dailydare.core.logger.logger import get_logger
from dailydare.infra.config.settings import settings

logger = get_logger(__name__)

R = TypeVar("R")

# Receives the current profile (None if absent) and returns the profile to
# write (None means "no write") together with the caller's result.
ProfileMutator = Callable[[Optional[UserProfile]], Awaitable[Tuple[Optional[UserProfile], R]]]

LEADERBOARD_KEY = "dare:leaderboard"
LEADERBOARD_NAMES_KEY = "dare:leaderboard:names"


class ProfileStore:
    """Redis store for user profiles.

    Every write goes through `update`, which watches the profile key and
    retries the whole read-modify-write when another writer got there first.
    The leaderboard mirror is written in the same MULTI block.
    """

    def __init__(self, redis_client: redis.Redis, max_retries: Optional[int] = None):
        self.redis = redis_client
        self.key_prefix = "dare:profile:"
        self.max_retries = settings.PROFILE_UPDATE_MAX_RETRIES if max_retries is None else max_retries

    def _get_key(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    def key_for(self, user_id: str) -> str:
        return self._get_key(user_id)

    def _serialize_profile(self, profile: UserProfile) -> str:
        return profile.model_dump_json()

    def deserialize(self, user_id: str, data: str) -> UserProfile:
        return self._deserialize_profile(user_id, data)

    def queue_write(self, pipe, profile: UserProfile) -> None:
        """Queue the profile and its leaderboard mirror on a MULTI pipeline"""
        pipe.set(self._get_key(profile.user_id), self._serialize_profile(profile))
        pipe.zadd(LEADERBOARD_KEY, {profile.user_id: profile.score})
        pipe.hset(LEADERBOARD_NAMES_KEY, profile.user_id, profile.display_name or profile.user_id[:8])

    def _deserialize_profile(self, user_id: str, data: str) -> UserProfile:
        try:
            profile_dict = json.loads(data)
            profile_dict.setdefault("user_id", user_id)
            return UserProfile.model_validate(profile_dict)
        except (json.JSONDecodeError, ValidationError, TypeError, AttributeError) as e:
            logger.error(
                "Malformed profile document",
                extra={"user_id": user_id, "error": str(e)}
            )
            raise ProfileCorruptedError(user_id, str(e))

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get profile from Redis if it exists"""
        try:
            data = await self.redis.get(self._get_key(user_id))
            if not data:
                return None
            return self._deserialize_profile(user_id, data)

        except redis.RedisError as e:
            logger.error(
                "Error getting profile",
                extra={"user_id": user_id, "error": str(e)}
            )
            raise

    async def update(self, user_id: str, mutate: ProfileMutator) -> R:
        """Optimistic read-modify-write of one profile.

        Raises ProfileConflictError once `max_retries` attempts have all lost
        the race.
        """
        key = self._get_key(user_id)

        for attempt in range(1, self.max_retries + 1):
            async with self.redis.pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(key)
                    data = await pipe.get(key)
                    current = self._deserialize_profile(user_id, data) if data else None

                    new_profile, result = await mutate(current)
                    if new_profile is None:
                        await pipe.unwatch()
                        return result

                    new_profile = new_profile.model_copy(
                        update={"version": (current.version if current else 0) + 1}
                    )

                    pipe.multi()
                    self.queue_write(pipe, new_profile)
                    await pipe.execute()

                    logger.debug(
                        "Saved profile",
                        extra={"user_id": user_id, "version": new_profile.version, "attempt": attempt}
                    )
                    return result

                except redis.WatchError:
                    logger.info(
                        "Profile changed during update, retrying",
                        extra={"user_id": user_id, "attempt": attempt}
                    )
                    continue

        logger.error(
            "Profile update retries exhausted",
            extra={"user_id": user_id, "attempts": self.max_retries}
        )
        raise ProfileConflictError(user_id, self.max_retries)
