from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping
from typing import Generic, TypeVar

from ..domain import CacheEntry

T = TypeVar("T")

Clock = Callable[[], float]


class TTLCache(Generic[T]):
    """Keyed store of timestamped values with a fixed freshness window.

    Expired entries are kept so they can serve as a fallback; they are only
    replaced when a newer value is written.
    """

    def __init__(self, ttl: float, clock: Clock | None = None):
        if ttl < 0:
            raise ValueError(f"Cache TTL must be non-negative, got {ttl}")
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._entries: dict[str, CacheEntry[T]] = {}

    def now(self) -> float:
        return self._clock()

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        return self._entries.get(key)

    def get_fresh(self, key: str) -> T | None:
        """Return the value for ``key`` only if it is within the TTL."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self.now(), self.ttl):
            return None
        return entry.value

    def get_any(self, key: str) -> T | None:
        """Return the last stored value for ``key`` regardless of age."""
        entry = self._entries.get(key)
        return None if entry is None else entry.value

    def is_fresh(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.is_fresh(self.now(), self.ttl)

    def partition(self, keys: Iterable[str]) -> tuple[list[str], list[str]]:
        """Split ``keys`` into (fresh, needs_fetch), preserving order."""
        now = self.now()
        fresh: list[str] = []
        needs_fetch: list[str] = []
        for key in keys:
            entry = self._entries.get(key)
            if entry is not None and entry.is_fresh(now, self.ttl):
                fresh.append(key)
            else:
                needs_fetch.append(key)
        return fresh, needs_fetch

    def set(self, key: str, value: T) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self.now())

    def set_many(self, values: Mapping[str, T]) -> None:
        fetched_at = self.now()
        for key, value in values.items():
            self._entries[key] = CacheEntry(value=value, fetched_at=fetched_at)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
