import uuid
from typing import Any, Dict, List, Optional

from dailydare.core.service.dare.cache.catalog_store import DareCatalogStore
from dailydare.core.service.dare.models.dare import DareTemplate, Difficulty
from dailydare.core.service.dare.seed_dares import INITIAL_DARES
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)


class DareCatalogService:
    """Read access to the dare catalog plus its seeding routine"""

    def __init__(self, catalog_store: DareCatalogStore, seed_data: Optional[List[Dict[str, Any]]] = None):
        self.store = catalog_store
        self.seed_data = seed_data if seed_data is not None else INITIAL_DARES

    async def list_by_difficulty(self, difficulty: Difficulty) -> List[DareTemplate]:
        templates = await self.store.list_by_difficulty(difficulty)
        if not templates:
            logger.warning("No catalog dares for difficulty", extra={"difficulty": difficulty.value})
        return templates

    async def get(self, dare_id: str) -> Optional[DareTemplate]:
        return await self.store.get(dare_id)

    async def seed_dares(self) -> bool:
        """
        Re-seed the catalog when it holds fewer dares than the master list.

        Existing catalog entries are deleted and the full set is written with
        fresh ids. User profiles are never touched; dares already assigned
        keep their own snapshot.

        Returns:
            bool: True if the catalog was re-seeded
        """
        expected = len(self.seed_data)
        current = await self.store.count()

        if current >= expected:
            logger.info(
                "Catalog up to date, seeding skipped",
                extra={"catalog_size": current, "expected": expected}
            )
            return False

        templates = [
            DareTemplate(id=uuid.uuid4().hex, **dare)
            for dare in self.seed_data
        ]
        await self.store.replace_all(templates)

        logger.info(
            "Catalog re-seeded",
            extra={"deleted": current, "written": len(templates)}
        )
        return True
