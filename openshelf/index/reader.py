"""
Read path for the persisted metadata index.
"""

import logging
from typing import Optional

from openshelf.cache.metainfo import MetaInfoCache
from openshelf.database.store import MetadataStore
from openshelf.index.models import MetaInfo

logger = logging.getLogger(__name__)

DEFAULT_METAINFO_KEY = "video.metainfo"


async def load_meta_info(store: MetadataStore, key: str = DEFAULT_METAINFO_KEY) -> Optional[MetaInfo]:
    """
    Load the stored index.

    Returns None when nothing is stored. A store error or an unreadable
    document is logged and also treated as absent.
    """
    try:
        content = await store.get_global_value(key)
    except Exception as e:
        logger.warning(f"Failed to read {key}: {e}")
        return None

    if not content:
        return None

    try:
        return MetaInfo.from_json(content)
    except ValueError as e:
        logger.warning(f"Stored {key} is not a valid metainfo document: {e}")
        return None


class MetaInfoReader:
    """Cache-first access to the index for browsing clients."""

    def __init__(
        self,
        store: MetadataStore,
        cache: MetaInfoCache,
        key: str = DEFAULT_METAINFO_KEY,
    ):
        self.store = store
        self.cache = cache
        self.key = key

    async def get(self, root: str) -> Optional[MetaInfo]:
        cached = await self.cache.get(root)
        if cached is not None:
            return cached

        meta_info = await load_meta_info(self.store, self.key)
        if meta_info is not None:
            await self.cache.set(root, meta_info)
        return meta_info
