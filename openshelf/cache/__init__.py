"""
OpenShelf caching layer.

In-memory TTL/LRU cache and the per-root metadata index cache built on it.
"""

from openshelf.cache.memory import CacheStats, MemoryCache
from openshelf.cache.metainfo import MetaInfoCache

__all__ = [
    "CacheStats",
    "MemoryCache",
    "MetaInfoCache",
]
