import random
from datetime import date, timedelta

import fakeredis
import pytest

from dailydare.core.service.dare.cache.catalog_store import DareCatalogStore
from dailydare.core.service.dare.cache.profile_store import ProfileStore
from dailydare.core.service.dare.catalog_service import DareCatalogService
from dailydare.core.service.dare.economy_service import DareEconomyService
from dailydare.core.service.dare.models.profile import UserProfile


class FixedClock:
    """Clock pinned to a given day; tests move it explicitly"""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> None:
        self.current += timedelta(days=days)


@pytest.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def clock():
    return FixedClock(date(2025, 3, 10))


@pytest.fixture
def profile_store(redis_client):
    return ProfileStore(redis_client)


@pytest.fixture
async def catalog_service(redis_client):
    service = DareCatalogService(DareCatalogStore(redis_client))
    await service.seed_dares()
    return service


@pytest.fixture
def economy(profile_store, catalog_service, clock):
    return DareEconomyService(profile_store, catalog_service, clock=clock, rng=random.Random(7))


@pytest.fixture
def set_profile_fields(profile_store):
    """Overwrite fields on a stored profile, creating it when missing"""

    async def _set(user_id: str, **fields) -> UserProfile:
        async def mutate(profile):
            profile = profile or UserProfile(user_id=user_id)
            updated = profile.model_copy(update=fields)
            return updated, updated

        return await profile_store.update(user_id, mutate)

    return _set
