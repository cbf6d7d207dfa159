"""
In-memory cache implementation.

Holds fetched weather records keyed by normalized city name. Entries expire
lazily: a stale entry stays in the map but is reported as absent by
``is_valid`` and ``get_valid`` until it is overwritten or cleaned up.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the time it was stored."""

    key: str
    payload: Any
    fetched_at: float


class CacheStore:
    """Time-bounded key/value memo.

    Size is unbounded; use ``clear`` or ``cleanup`` to reclaim memory.
    """

    CACHE_DURATION = 600  # 10 minutes

    def __init__(
        self,
        ttl_seconds: float = CACHE_DURATION,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache store.

        Args:
            ttl_seconds: How long an entry stays valid after insertion.
            clock: Returns the current time in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get the entry for a key, stale or not."""
        return self._entries.get(key)

    def put(self, key: str, payload: Any) -> CacheEntry:
        """Store a payload stamped with the current time."""
        entry = CacheEntry(key=key, payload=payload, fetched_at=self._clock())
        self._entries[key] = entry
        return entry

    def is_valid(self, key: str) -> bool:
        """Return True if an entry exists and is younger than the TTL."""
        entry = self._entries.get(key)
        return entry is not None and self._clock() - entry.fetched_at < self.ttl_seconds

    def get_valid(self, key: str) -> Optional[Any]:
        """Get the payload only if its entry is still valid."""
        if self.is_valid(key):
            return self._entries[key].payload
        return None

    def cleanup(self) -> int:
        """Remove stale entries.

        Returns:
            Number of entries removed.
        """
        stale = [key for key in self._entries if not self.is_valid(key)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries removed.
        """
        count = len(self._entries)
        self._entries.clear()
        return count

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        valid = sum(1 for key in self._entries if self.is_valid(key))
        return {
            "total_entries": len(self._entries),
            "valid_entries": valid,
            "expired_entries": len(self._entries) - valid,
            "ttl_seconds": self.ttl_seconds,
        }
