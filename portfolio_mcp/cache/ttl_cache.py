"""In-memory TTL cache for risk-profile feed lookups.

One feed answer per risk tier is kept for `cache_ttl_seconds`. Misses that load
nothing (`None`) are not stored, so an unavailable feed is retried on the next
request instead of being remembered as empty.
"""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable, TypeVar

T = TypeVar("T")


class TTLCache:
    def __init__(self, default_ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl_seconds = max(1, default_ttl_seconds)
        self._clock = clock
        self._entries: dict[str, tuple[float, object]] = {}
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def _live(self, key: str) -> tuple[bool, object]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return False, None
        return True, value

    def get(self, key: str) -> object | None:
        with self._lock:
            return self._live(key)[1]

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else max(1, ttl_seconds)
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)

    def get_or_load(self, key: str, load: Callable[[], T | None], ttl_seconds: int | None = None) -> T | None:
        with self._lock:
            found, value = self._live(key)
            if found:
                self.hits += 1
                return value  # type: ignore[return-value]
            self.misses += 1
        loaded = load()
        if loaded is not None:
            self.set(key, loaded, ttl_seconds=ttl_seconds)
        return loaded

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
