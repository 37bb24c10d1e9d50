import random

import pytest

from dailydare.core.service.dare.cache.catalog_store import DareCatalogStore
from dailydare.core.service.dare.catalog_service import DareCatalogService
from dailydare.core.service.dare.models.dare import DareTemplate, Difficulty
from dailydare.core.service.dare.selection import pick_personalized
from dailydare.core.service.dare.seed_dares import INITIAL_DARES


def template(id_, tags, difficulty=Difficulty.EASY):
    return DareTemplate(id=id_, title=id_, description="d", points=50, difficulty=difficulty, tags=tags)


class TestPickPersonalized:

    def test_prefers_matching_tags(self):
        pool = [template("a", ["Food"]), template("b", ["Fitness"]), template("c", ["Social"])]

        for seed in range(20):
            choice = pick_personalized(pool, ["fitness"], [], random.Random(seed))
            assert choice.id == "b"

    def test_falls_back_when_preferred_excluded(self):
        pool = [template("a", ["Food"]), template("b", ["Fitness"])]

        choice = pick_personalized(pool, ["Fitness"], ["b"], random.Random(1))

        assert choice.id == "a"

    def test_no_interests_uses_whole_pool(self):
        pool = [template("a", ["Food"]), template("b", ["Fitness"])]
        seen = {pick_personalized(pool, [], [], random.Random(seed)).id for seed in range(30)}

        assert seen == {"a", "b"}

    def test_everything_excluded_returns_none(self):
        pool = [template("a", ["Food"])]

        assert pick_personalized(pool, [], ["a"], random.Random(1)) is None


@pytest.mark.asyncio
class TestCatalogSeeding:

    async def test_seed_writes_full_catalog(self, redis_client):
        service = DareCatalogService(DareCatalogStore(redis_client))

        assert await service.seed_dares() is True
        assert await service.store.count() == len(INITIAL_DARES)
        for difficulty in Difficulty:
            assert len(await service.list_by_difficulty(difficulty)) == 5

    async def test_seed_skips_full_catalog(self, catalog_service):
        before = await catalog_service.list_by_difficulty(Difficulty.EASY)

        assert await catalog_service.seed_dares() is False
        assert await catalog_service.list_by_difficulty(Difficulty.EASY) == before

    async def test_partial_catalog_is_replaced(self, catalog_service):
        easy = await catalog_service.list_by_difficulty(Difficulty.EASY)
        await catalog_service.store.replace_all(easy[:2])

        assert await catalog_service.seed_dares() is True
        assert await catalog_service.store.count() == len(INITIAL_DARES)
        new_ids = {t.id for t in await catalog_service.list_by_difficulty(Difficulty.EASY)}
        assert new_ids.isdisjoint({t.id for t in easy[:2]})

    async def test_seed_leaves_assigned_dares_alone(self, economy, catalog_service):
        assigned = await economy.assign_daily_dares("user-1")
        await catalog_service.store.replace_all([])

        await catalog_service.seed_dares()

        profile = await economy.get_profile("user-1")
        assert [d.dare_id for d in profile.daily_dares] == [d.dare_id for d in assigned.dares]

    async def test_malformed_entry_is_skipped(self, catalog_service, redis_client):
        store = catalog_service.store
        await redis_client.hset(store.docs_key, "broken", "{oops")
        await redis_client.sadd(store._get_difficulty_key(Difficulty.EASY), "broken")

        templates = await catalog_service.list_by_difficulty(Difficulty.EASY)

        assert len(templates) == 5
