"""
Result Cache - TTL cache for upstream search responses

Entries are keyed by marketplace + query + extra query parameters and are
only visible until their expiry. Expired entries are dropped lazily on the
next lookup of the same key; there is no size-based eviction.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode


@dataclass
class CacheEntry:
    """Single cache entry with its absolute expiry"""
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class ResultCache:
    """
    Process-local TTL cache

    Features:
    - Per-entry TTL set on write
    - Lazy purge of expired entries on read
    - Hit tracking for the health endpoint
    """

    def __init__(self, default_ttl: int = 300, clock: Callable[[], float] = time.time):
        self.default_ttl = default_ttl
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._stats = {
            'hits': 0,
            'misses': 0,
            'expirations': 0
        }

    @staticmethod
    def make_key(marketplace: str, query: str, extra_params: Optional[Mapping[str, Any]] = None) -> str:
        """Create cache key from marketplace, query text and extra params"""
        extra = urlencode(sorted((k, str(v)) for k, v in (extra_params or {}).items()))
        return f"{marketplace}|{query}|{extra}"

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent or expired"""
        entry = self._cache.get(key)
        if entry is None:
            self._stats['misses'] += 1
            return None

        if entry.is_expired(self._clock()):
            del self._cache[key]
            self._stats['expirations'] += 1
            self._stats['misses'] += 1
            return None

        self._stats['hits'] += 1
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value until now + ttl"""
        ttl = self.default_ttl if ttl is None else ttl
        self._cache[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def clear(self) -> int:
        """Clear all cache entries, return count cleared"""
        count = len(self._cache)
        self._cache.clear()
        return count

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        total_requests = self._stats['hits'] + self._stats['misses']
        hit_rate = (
            self._stats['hits'] / total_requests * 100
            if total_requests > 0 else 0
        )
        return {
            'size': len(self._cache),
            'ttl': self.default_ttl,
            'hits': self._stats['hits'],
            'misses': self._stats['misses'],
            'hit_rate': f"{hit_rate:.1f}%",
            'expirations': self._stats['expirations'],
        }
