"""In-memory TTL cache owned by a single resolver instance."""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")
Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value with the time it was stored and how long it stays valid."""
    value: T
    created_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        """Return True while ``now - created_at`` is under the TTL."""
        return now - self.created_at < self.ttl


class TTLCache(Generic[T]):
    """
    Time-boxed key/value store.

    Entries are checked against the wall clock when read; nothing sweeps them
    in the background. Writes overwrite, so concurrent fills of the same key
    simply leave the last value.
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Clock | None = None) -> None:
        """Initialize the cache with a default TTL and an optional clock (seconds)."""
        self.ttl = float(ttl_seconds)
        self._clock = clock or time.time
        self._entries: Dict[Hashable, CacheEntry[T]] = {}

    def get(self, key: Hashable) -> Optional[T]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: Hashable, value: T, ttl_seconds: float | None = None) -> CacheEntry[T]:
        """Store ``value`` under ``key`` with this cache's TTL unless overridden."""
        entry = CacheEntry(
            value=value,
            created_at=self._clock(),
            ttl=self.ttl if ttl_seconds is None else float(ttl_seconds),
        )
        self._entries[key] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)
