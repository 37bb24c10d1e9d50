"""
FastAPI dependency injection functions.
Clean, maintainable dependency resolution using FastAPI's native DI system.
"""

from typing import Optional
from fastapi import Depends, Header
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from dailydare.infra.config.redis import get_redis
from dailydare.infra.database import get_optional_session
from dailydare.infra.repository.dare_activity_repository import DareActivityRepository
from dailydare.core.service.dare.cache.catalog_store import DareCatalogStore
from dailydare.core.service.dare.cache.profile_store import ProfileStore
from dailydare.core.service.dare.catalog_service import DareCatalogService
from dailydare.core.service.dare.clock import SystemClock
from dailydare.core.service.dare.economy_service import DareEconomyService
from dailydare.core.service.feed.cache.post_store import PostStore
from dailydare.core.service.feed.feed_service import FeedService
from dailydare.core.service.leaderboard.leaderboard_service import LeaderboardService
from dailydare.core.service.bonus.bonus_dare_service import BonusDareService
from dailydare.api.controller.dare.dare_controller import DareController
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)


async def get_redis_client() -> Redis:
    """Get Redis client dependency."""
    return await get_redis()


async def get_activity_repository(
    session: Optional[AsyncSession] = Depends(get_optional_session)
) -> Optional[DareActivityRepository]:
    """Activity ledger repository, or None when the ledger is off."""
    if session is None:
        return None
    return DareActivityRepository(session)


def get_clock(x_timezone: Optional[str] = Header(None)) -> SystemClock:
    """Calendar-day clock in the caller's zone (X-Timezone header)."""
    return SystemClock(x_timezone)


async def get_profile_store(redis_client: Redis = Depends(get_redis_client)) -> ProfileStore:
    return ProfileStore(redis_client)


async def get_catalog_service(redis_client: Redis = Depends(get_redis_client)) -> DareCatalogService:
    return DareCatalogService(DareCatalogStore(redis_client))


async def get_economy_service(
    profile_store: ProfileStore = Depends(get_profile_store),
    catalog_service: DareCatalogService = Depends(get_catalog_service),
    clock: SystemClock = Depends(get_clock),
    activity_repository: Optional[DareActivityRepository] = Depends(get_activity_repository)
) -> DareEconomyService:
    return DareEconomyService(profile_store, catalog_service, clock=clock, activity_repository=activity_repository)


def get_bonus_service() -> BonusDareService:
    return BonusDareService()


async def get_dare_controller(
    economy_service: DareEconomyService = Depends(get_economy_service),
    bonus_service: BonusDareService = Depends(get_bonus_service)
) -> DareController:
    return DareController(economy_service, bonus_service)


async def get_feed_service(
    redis_client: Redis = Depends(get_redis_client),
    profile_store: ProfileStore = Depends(get_profile_store),
    activity_repository: Optional[DareActivityRepository] = Depends(get_activity_repository)
) -> FeedService:
    return FeedService(PostStore(redis_client), profile_store, activity_repository)


async def get_leaderboard_service(redis_client: Redis = Depends(get_redis_client)) -> LeaderboardService:
    return LeaderboardService(redis_client)
