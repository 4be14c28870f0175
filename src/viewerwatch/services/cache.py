"""Expiring in-process cache handed to the polling producers.

Each entry carries its own TTL so one cache can hold values with different
lifetimes (a resolved channel id lives longer than a live status, an
offline status longer than a live one). Producers receive the cache as a
constructor argument; nothing here is module-level state.
"""

import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache  # type: ignore[import-untyped]

# Sentinel object to distinguish "not in cache" from cached None values
MISSING = object()


class ExpiringCache:
    """Key-value store where every ``set`` names its own TTL in seconds."""

    def __init__(
        self,
        maxsize: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TLRUCache = TLRUCache(
            maxsize=maxsize,
            ttu=lambda _key, entry, now: now + entry[1],
            timer=timer,
        )

    def get(self, key: str) -> Any:
        """Return the cached value or ``MISSING`` if absent or expired."""
        entry = self._cache.get(key)
        if entry is None:
            return MISSING
        return entry[0]

    def set(self, key: str, value: Any, ttl: float) -> None:
        self._cache[key] = (value, ttl)

    def invalidate(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    @property
    def size(self) -> int:
        self._cache.expire()
        return len(self._cache)
