"""TTL-based caching service with hit/miss statistics."""

import logging
import threading
import time
from typing import Any, Callable, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TTL = 1800  # 30 minutes


@dataclass(frozen=True)
class CacheEntry:
    """A single cached payload and when it was stored."""
    value: Any
    stored_at: float


@dataclass
class CacheStats:
    """Lookup counters. ``total_requests`` always equals hits + misses."""
    hits: int = 0
    misses: int = 0
    total_requests: int = 0

    @property
    def hit_rate(self) -> str:
        if self.total_requests == 0:
            return "0%"
        return f"{self.hits / self.total_requests * 100:.2f}%"


class Cache:
    """In-memory cache with a single TTL and lookup statistics.

    Entries are checked for expiry lazily on ``get`` and removed eagerly by
    ``sweep``, which the application runs on a fixed interval.
    """

    def __init__(self, ttl: int = DEFAULT_TTL, clock: Optional[Callable[[], float]] = None):
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._cache: dict[str, CacheEntry] = {}
        self._stats = CacheStats()
        self._lock = threading.Lock()

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at < self.ttl

    def get(self, key: Any) -> Optional[Any]:
        """Get cached data if not expired. Every call counts as a hit or a miss.

        Malformed (unhashable) keys are treated as a miss.
        """
        with self._lock:
            self._stats.total_requests += 1
            try:
                entry = self._cache.get(key)
            except TypeError:
                # Unhashable key
                entry = None

            if entry is None or not self._is_fresh(entry, self._clock()):
                self._stats.misses += 1
                return None

            self._stats.hits += 1
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any existing entry for the key."""
        with self._lock:
            self._cache[key] = CacheEntry(value=value, stored_at=self._clock())

    def sweep(self) -> None:
        """Remove every entry that has outlived the TTL."""
        with self._lock:
            now = self._clock()
            expired = [
                key for key, entry in self._cache.items()
                if not self._is_fresh(entry, now)
            ]
            for key in expired:
                del self._cache[key]

        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))

    def clear(self) -> int:
        """Clear all entries and reset statistics. Returns the prior entry count."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._stats = CacheStats()
        return count

    def stats(self) -> dict:
        """Snapshot of the counters, the derived hit rate and the entry count."""
        with self._lock:
            return {
                "hits": self._stats.hits,
                "misses": self._stats.misses,
                "totalRequests": self._stats.total_requests,
                "hitRate": self._stats.hit_rate,
                "size": len(self._cache),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
