"""Integration tests for optimistic profile updates."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from dailydare.core.exceptions.base import ProfileConflictError, ProfileCorruptedError
from dailydare.core.service.dare.cache.profile_store import LEADERBOARD_KEY, ProfileStore
from dailydare.core.service.dare.models.dare import Difficulty
from dailydare.core.service.dare.models.profile import UserProfile
from dailydare.core.service.dare.models.results import FailureKind


@pytest.mark.asyncio
class TestProfileStore:

    async def test_update_creates_and_bumps_version(self, profile_store):
        async def create(profile):
            assert profile is None
            new = UserProfile(user_id="user-1", score=5)
            return new, "created"

        assert await profile_store.update("user-1", create) == "created"
        stored = await profile_store.get_profile("user-1")
        assert stored.version == 1
        assert await profile_store.redis.zscore(LEADERBOARD_KEY, "user-1") == 5

    async def test_no_write_when_mutator_returns_none(self, profile_store, set_profile_fields):
        await set_profile_fields("user-1", score=5)

        async def read_only(profile):
            return None, profile.score

        assert await profile_store.update("user-1", read_only) == 5
        assert (await profile_store.get_profile("user-1")).version == 1

    async def test_retries_after_concurrent_write(self, profile_store, redis_client, set_profile_fields):
        await set_profile_fields("user-1", score=0)
        calls = 0

        async def mutate(profile):
            nonlocal calls
            calls += 1
            if calls == 1:
                # Another writer lands between our read and our EXEC
                sneaky = profile.model_copy(update={"score": 100})
                await redis_client.set(profile_store.key_for("user-1"), sneaky.model_dump_json())
            updated = profile.model_copy(update={"score": profile.score + 10})
            return updated, updated.score

        assert await profile_store.update("user-1", mutate) == 110
        assert calls == 2
        assert (await profile_store.get_profile("user-1")).score == 110

    async def test_exhausted_retries_raise_conflict(self, redis_client, set_profile_fields):
        store = ProfileStore(redis_client, max_retries=2)
        await set_profile_fields("user-1", score=0)

        async def always_conflicts(profile):
            await redis_client.set(store.key_for("user-1"), profile.model_dump_json())
            return profile.model_copy(update={"score": 1}), None

        with pytest.raises(ProfileConflictError):
            await store.update("user-1", always_conflicts)

    async def test_zero_retries_is_respected(self, redis_client, set_profile_fields):
        store = ProfileStore(redis_client, max_retries=0)
        await set_profile_fields("user-1", score=0)
        mutate = AsyncMock(return_value=(None, None))

        assert store.max_retries == 0
        with pytest.raises(ProfileConflictError):
            await store.update("user-1", mutate)
        mutate.assert_not_awaited()

    async def test_malformed_document_raises(self, profile_store, redis_client):
        await redis_client.set(profile_store.key_for("user-1"), "{not json")

        with pytest.raises(ProfileCorruptedError):
            await profile_store.get_profile("user-1")

    async def test_legacy_document_gets_defaults(self, profile_store, redis_client):
        await redis_client.set(profile_store.key_for("user-1"), '{"score": 40}')

        profile = await profile_store.get_profile("user-1")

        assert profile.user_id == "user-1"
        assert profile.score == 40
        assert profile.reroll_tokens == 0
        assert profile.daily_dares == []


@pytest.mark.asyncio
class TestEngineConcurrency:

    async def test_concurrent_completions_both_land(self, economy):
        assigned = await economy.assign_daily_dares("user-1")
        easy, medium = assigned.dares[0], assigned.dares[1]

        results = await asyncio.gather(
            economy.complete_dare("user-1", easy.dare_id),
            economy.complete_dare("user-1", medium.dare_id),
        )

        assert all(r.success for r in results)
        profile = await economy.get_profile("user-1")
        assert profile.score == easy.points + medium.points
        assert profile.dares_completed_count == 2
        assert all(d.completed for d in profile.daily_dares[:2])

    async def test_concurrent_same_dare_scores_once(self, economy):
        assigned = await economy.assign_daily_dares("user-1")
        easy = assigned.dares[0]

        results = await asyncio.gather(
            economy.complete_dare("user-1", easy.dare_id),
            economy.complete_dare("user-1", easy.dare_id),
        )

        assert sorted(r.success for r in results) == [False, True]
        assert (await economy.get_profile("user-1")).score == easy.points

    async def test_storage_errors_are_transient(self, economy):
        economy.profiles.update = AsyncMock(side_effect=redis.ConnectionError("down"))

        result = await economy.reroll_dare("user-1", "any")

        assert not result.success
        assert result.failure == FailureKind.TRANSIENT

    async def test_conflicts_are_transient(self, economy):
        economy.profiles.update = AsyncMock(side_effect=ProfileConflictError("user-1", 5))

        result = await economy.purchase_reroll_token("user-1")

        assert result.failure == FailureKind.TRANSIENT

    async def test_corrupted_profile_propagates(self, economy, redis_client):
        await redis_client.set(economy.profiles.key_for("user-1"), "[]")

        with pytest.raises(ProfileCorruptedError):
            await economy.assign_daily_dares("user-1")
