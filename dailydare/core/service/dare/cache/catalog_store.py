from typing import Dict, List, Optional, Sequence

import redis.asyncio as redis
from pydantic import ValidationError

from dailydare.core.service.dare.models.dare import DareTemplate, Difficulty, DIFFICULTY_ORDER
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)


class DareCatalogStore:
    """Redis store for the dare catalog.

    Templates live in one hash keyed by id; one set per difficulty indexes
    them for equality queries.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client
        self.key_prefix = "dare:catalog:"
        self.docs_key = f"{self.key_prefix}docs"

    def _get_difficulty_key(self, difficulty: Difficulty) -> str:
        return f"{self.key_prefix}difficulty:{difficulty.value.lower()}"

    def _deserialize_templates(self, raw_docs: Sequence[Optional[str]]) -> List[DareTemplate]:
        templates = []
        for data in raw_docs:
            if not data:
                continue
            try:
                templates.append(DareTemplate.model_validate_json(data))
            except ValidationError as e:
                # A broken catalog entry is skipped, not fatal for the whole tier
                logger.error("Skipping malformed catalog entry", extra={"error": str(e)})
        return templates

    async def list_by_difficulty(self, difficulty: Difficulty) -> List[DareTemplate]:
        """All templates of one tier, ordered by id. Empty list is valid."""
        try:
            ids = sorted(await self.redis.smembers(self._get_difficulty_key(difficulty)))
            if not ids:
                return []
            raw_docs = await self.redis.hmget(self.docs_key, ids)
            return self._deserialize_templates(raw_docs)

        except redis.RedisError as e:
            logger.error(
                "Error listing catalog dares",
                extra={"difficulty": difficulty.value, "error": str(e)}
            )
            raise

    async def get(self, dare_id: str) -> Optional[DareTemplate]:
        data = await self.redis.hget(self.docs_key, dare_id)
        if not data:
            return None
        templates = self._deserialize_templates([data])
        return templates[0] if templates else None

    async def count(self) -> int:
        return await self.redis.hlen(self.docs_key)

    async def replace_all(self, templates: List[DareTemplate]) -> None:
        """Delete every catalog entry and write the given set in one transaction"""
        by_difficulty: Dict[Difficulty, List[str]] = {d: [] for d in DIFFICULTY_ORDER}
        for template in templates:
            by_difficulty[template.difficulty].append(template.id)

        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(self.docs_key, *[self._get_difficulty_key(d) for d in DIFFICULTY_ORDER])
                if templates:
                    pipe.hset(
                        self.docs_key,
                        mapping={t.id: t.model_dump_json() for t in templates}
                    )
                for difficulty, ids in by_difficulty.items():
                    if ids:
                        pipe.sadd(self._get_difficulty_key(difficulty), *ids)
                await pipe.execute()

            logger.info(
                "Catalog replaced",
                extra={
                    "total": len(templates),
                    "per_difficulty": {d.value: len(ids) for d, ids in by_difficulty.items()}
                }
            )

        except redis.RedisError as e:
            logger.error("Error replacing catalog", extra={"error": str(e)})
            raise
