import json
from typing import List, Optional

import redis.asyncio as redis
from pydantic import ValidationError

from dailydare.core.service.feed.models import CommunityPost
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)

FEED_KEY = "dare:feed"


class PostStore:
    """Redis store for community posts, indexed newest-first by a sorted set"""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client
        self.key_prefix = "dare:post:"

    def key_for(self, post_id: str) -> str:
        return f"{self.key_prefix}{post_id}"

    def serialize(self, post: CommunityPost) -> str:
        return post.model_dump_json()

    def deserialize(self, data: str) -> Optional[CommunityPost]:
        try:
            return CommunityPost.model_validate(json.loads(data))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("Skipping malformed post", extra={"error": str(e)})
            return None

    async def save(self, post: CommunityPost) -> None:
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(self.key_for(post.post_id), self.serialize(post))
                pipe.zadd(FEED_KEY, {post.post_id: post.created_at.timestamp()})
                await pipe.execute()
        except redis.RedisError as e:
            logger.error("Error saving post", extra={"post_id": post.post_id, "error": str(e)})
            raise

    async def get(self, post_id: str) -> Optional[CommunityPost]:
        data = await self.redis.get(self.key_for(post_id))
        if not data:
            return None
        return self.deserialize(data)

    async def list_recent(self, limit: int) -> List[CommunityPost]:
        post_ids = await self.redis.zrevrange(FEED_KEY, 0, limit - 1)
        if not post_ids:
            return []

        documents = await self.redis.mget([self.key_for(post_id) for post_id in post_ids])
        posts = []
        for data in documents:
            if not data:
                continue
            post = self.deserialize(data)
            if post:
                posts.append(post)
        return posts
