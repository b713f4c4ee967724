"""
In-memory LRU cache implementation with TTL support.
"""

import fnmatch
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Optional


@dataclass
class CacheEntry:
    """A single cache entry with metadata."""
    value: Any
    expires_at: float

    @property
    def is_expired(self) -> bool:
        """Check if entry has expired."""
        return time.time() >= self.expires_at


@dataclass
class CacheStats:
    """Cache statistics."""
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    entry_count: int = 0


class MemoryCache:
    """
    Thread-safe in-memory LRU cache with TTL support.

    Features:
    - LRU eviction when max entries reached
    - Time-based expiration
    - Pattern-based deletion
    - Hit/miss statistics
    """

    def __init__(self, max_entries: int = 1000, default_ttl: int = 60):
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self.stats = CacheStats()
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = Lock()

    def _evict_lru(self) -> None:
        """Evict least recently used entries until under limit."""
        while len(self._cache) >= self.max_entries:
            self._cache.popitem(last=False)
            self.stats.evictions += 1

    async def get(self, key: str) -> Optional[Any]:
        """Get a value from cache."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                self.stats.misses += 1
                return None

            if entry.is_expired:
                del self._cache[key]
                self.stats.misses += 1
                self.stats.entry_count = len(self._cache)
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            self.stats.hits += 1
            return entry.value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set a value in cache."""
        entry = CacheEntry(
            value=value,
            expires_at=time.time() + (self.default_ttl if ttl is None else ttl),
        )

        with self._lock:
            self._cache.pop(key, None)
            self._evict_lru()
            self._cache[key] = entry
            self.stats.sets += 1
            self.stats.entry_count = len(self._cache)

    async def delete(self, key: str) -> bool:
        """Delete a value from cache."""
        with self._lock:
            if key not in self._cache:
                return False
            del self._cache[key]
            self.stats.deletes += 1
            self.stats.entry_count = len(self._cache)
            return True

    async def clear(self, pattern: Optional[str] = None) -> int:
        """Clear cache entries matching a glob pattern (all when None)."""
        with self._lock:
            if pattern is None:
                count = len(self._cache)
                self._cache.clear()
            else:
                keys_to_delete = [key for key in self._cache if fnmatch.fnmatch(key, pattern)]
                count = len(keys_to_delete)
                for key in keys_to_delete:
                    del self._cache[key]
            self.stats.entry_count = len(self._cache)
            return count

