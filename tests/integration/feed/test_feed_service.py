from datetime import datetime, timedelta, timezone

import pytest

from dailydare.core.service.dare.models.dare import Difficulty
from dailydare.core.service.dare.models.results import FailureKind
from dailydare.core.service.feed.cache.post_store import PostStore
from dailydare.core.service.feed.feed_service import FeedService
from dailydare.core.service.feed.models import CommunityPost, PostedDare, PostLocation


@pytest.fixture
def post_store(redis_client):
    return PostStore(redis_client)


@pytest.fixture
def feed(post_store, profile_store):
    return FeedService(post_store, profile_store)


def make_post(post_id, minutes_ago=0, double_dares=0):
    return CommunityPost(
        post_id=post_id,
        user_id="author",
        user_display_name="Author",
        dare_id="dare-1",
        dare_title="Plank",
        dare_difficulty=Difficulty.EASY,
        double_dares=double_dares,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


@pytest.mark.asyncio
class TestFeedService:

    async def test_create_post_uses_display_name(self, feed, set_profile_fields):
        await set_profile_fields("user-1", display_name="Sam")

        post = await feed.create_post(
            "user-1",
            PostedDare(dare_id="ai_1", title="Sing", difficulty=Difficulty.HARD, points=75, is_bonus=True, tags=["AI Dare"]),
            image_url="https://example.com/proof.jpg",
            location=PostLocation(latitude=52.5, longitude=13.4, address="Berlin")
        )

        assert post.user_display_name == "Sam"
        assert post.is_bonus
        assert post.points_awarded == 75
        assert post.likes == 0 and post.double_dares == 0
        assert (await feed.list_posts())[0].post_id == post.post_id

    async def test_list_posts_newest_first(self, feed, post_store):
        await post_store.save(make_post("old", minutes_ago=10))
        await post_store.save(make_post("new", minutes_ago=1))
        await post_store.save(make_post("middle", minutes_ago=5))

        posts = await feed.list_posts()

        assert [p.post_id for p in posts] == ["new", "middle", "old"]
        assert [p.post_id for p in await feed.list_posts(limit=1)] == ["new"]

    async def test_double_dare_charges_and_counts(self, feed, post_store, set_profile_fields, profile_store):
        await set_profile_fields("user-1", score=120)
        await post_store.save(make_post("p1", double_dares=2))

        result = await feed.double_dare("user-1", "p1")

        assert result.success
        assert result.score == 70
        assert result.double_dares == 3
        assert (await profile_store.get_profile("user-1")).score == 70
        assert (await post_store.get("p1")).double_dares == 3

    async def test_double_dare_insufficient_points(self, feed, post_store, set_profile_fields, profile_store):
        await set_profile_fields("user-1", score=49)
        await post_store.save(make_post("p1"))

        result = await feed.double_dare("user-1", "p1")

        assert result.failure == FailureKind.INSUFFICIENT_CURRENCY
        assert (await profile_store.get_profile("user-1")).score == 49
        assert (await post_store.get("p1")).double_dares == 0

    async def test_double_dare_missing_post_or_user(self, feed, post_store, set_profile_fields):
        await set_profile_fields("user-1", score=100)
        await post_store.save(make_post("p1"))

        assert (await feed.double_dare("user-1", "nope")).failure == FailureKind.NOT_FOUND
        assert (await feed.double_dare("ghost", "p1")).failure == FailureKind.NOT_FOUND
