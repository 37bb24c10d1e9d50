from typing import List, Optional

import redis.asyncio as redis
from pydantic import BaseModel

from dailydare.core.service.dare.cache.profile_store import LEADERBOARD_KEY, LEADERBOARD_NAMES_KEY
from dailydare.core.logger.logger import get_logger
from dailydare.infra.config.settings import settings

logger = get_logger(__name__)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    display_name: str
    score: int


class LeaderboardService:
    """Ranked view over the score mirror kept by ProfileStore"""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client
        self.size = settings.LEADERBOARD_SIZE
        self.search_window = settings.LEADERBOARD_SEARCH_WINDOW

    async def _ranked(self, count: int) -> List[LeaderboardEntry]:
        # Highest first; zero scores never rank
        rows = await self.redis.zrevrangebyscore(
            LEADERBOARD_KEY, "+inf", "(0", start=0, num=count, withscores=True
        )
        if not rows:
            return []

        user_ids = [user_id for user_id, _ in rows]
        names = await self.redis.hmget(LEADERBOARD_NAMES_KEY, user_ids)

        return [
            LeaderboardEntry(
                rank=index,
                user_id=user_id,
                display_name=name or user_id[:8],
                score=int(score)
            )
            for index, ((user_id, score), name) in enumerate(zip(rows, names), start=1)
        ]

    async def top(self, limit: Optional[int] = None, search: Optional[str] = None) -> List[LeaderboardEntry]:
        """
        Top players by score.

        With `search`, filters the top window by display name
        (case-insensitive) and ranks the matches from 1.
        """
        limit = limit or self.size
        try:
            if not search or not search.strip():
                return await self._ranked(limit)

            needle = search.strip().lower()
            matches = [
                entry for entry in await self._ranked(self.search_window)
                if needle in entry.display_name.lower()
            ][:limit]
            return [
                entry.model_copy(update={"rank": index})
                for index, entry in enumerate(matches, start=1)
            ]

        except redis.RedisError as e:
            logger.error("Error reading leaderboard", extra={"error": str(e)})
            raise
