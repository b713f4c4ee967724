"""
Per-root cache of the materialized metadata index.
"""

import logging
from typing import Optional

from openshelf.cache.memory import MemoryCache
from openshelf.index.models import MetaInfo

logger = logging.getLogger(__name__)

KEY_PREFIX = "metainfo:"


class MetaInfoCache:
    """
    Holds the last known MetaInfo for each scanned root path.

    The refresh pipeline invalidates a root when a scan starts and
    repopulates it once the new index has been persisted.
    """

    def __init__(
        self,
        backend: Optional[MemoryCache] = None,
        ttl: int = 7200,
        max_entries: int = 64,
    ):
        self.backend = backend or MemoryCache(max_entries=max_entries, default_ttl=ttl)
        self.ttl = ttl

    @staticmethod
    def _key(root: str) -> str:
        return f"{KEY_PREFIX}{root}"

    async def get(self, root: str) -> Optional[MetaInfo]:
        return await self.backend.get(self._key(root))

    async def set(self, root: str, meta_info: MetaInfo) -> None:
        await self.backend.set(self._key(root), meta_info, ttl=self.ttl)
        logger.debug(f"Cached metainfo for {root} ({len(meta_info.folders)} folders)")

    async def invalidate(self, root: str) -> None:
        if await self.backend.delete(self._key(root)):
            logger.debug(f"Invalidated metainfo cache for {root}")

    async def clear(self) -> int:
        return await self.backend.clear(f"{KEY_PREFIX}*")
