"""
In-memory caches for etymology lookups.

Two instances are used by the pipeline: a long-lived cache of complete
EtymologyResult objects keyed by (language, word), and a short-lived cache of
assembled graph responses. Both are plain TTL caches; concurrent misses for
the same key simply recompute.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from cachetools import TLRUCache
from loguru import logger


@dataclass
class _Entry:
    value: Any
    ttl: float


class EtymologyCache:
    """
    TTL key-value cache with an optional per-entry lifetime.

    Attributes:
        name: Label used in log messages and statistics
        default_ttl: Lifetime in seconds for entries stored without a ttl
    """

    def __init__(
        self,
        name: str,
        default_ttl: float,
        max_size: int = 1024,
        timer: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            name: Label for logging
            default_ttl: Default entry lifetime in seconds
            max_size: Maximum number of live entries
            timer: Clock used for expiry (injectable for tests)
        """
        self.name = name
        self.default_ttl = default_ttl
        self._store = TLRUCache(maxsize=max_size, ttu=self._time_to_use, timer=timer)
        self.hits = 0
        self.misses = 0

        logger.debug(f"{name} cache initialized (ttl={default_ttl}s, max_size={max_size})")

    @staticmethod
    def _time_to_use(key, entry: _Entry, now: float) -> float:
        return now + entry.ttl

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Retrieve a live entry.

        Args:
            key: Cache key

        Returns:
            The stored value, or None if missing or expired
        """
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        return entry.value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, replacing any previous entry for ``key``."""
        self._store[key] = _Entry(value, self.default_ttl if ttl is None else ttl)

    def delete(self, key: Hashable) -> bool:
        return self._store.pop(key, None) is not None

    def flush_all(self) -> None:
        count = len(self._store)
        self._store.clear()
        logger.info(f"{self.name} cache flushed ({count} entries)")

    def stats(self) -> Dict:
        self._store.expire()
        return {
            "name": self.name,
            "entries": len(self._store),
            "max_size": self._store.maxsize,
            "ttl": self.default_ttl,
            "hits": self.hits,
            "misses": self.misses,
        }

    def __contains__(self, key: Hashable) -> bool:
        return key in self._store

    def __len__(self) -> int:
        self._store.expire()
        return len(self._store)
