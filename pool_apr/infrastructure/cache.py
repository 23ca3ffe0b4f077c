from __future__ import annotations

from threading import Lock
import time
from typing import Generic, Hashable, TypeVar


T = TypeVar("T")


class TtlCache(Generic[T]):
    """Process-local cache whose entries expire ``ttl_seconds`` after being set.

    A non-positive TTL disables caching.
    """

    def __init__(self, ttl_seconds: float):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[Hashable, tuple[float, T]] = {}
        self._lock = Lock()

    def get(self, key: Hashable) -> T | None:
        if self.ttl_seconds <= 0:
            return None
        now = time.monotonic()
        with self._lock:
            cached = self._entries.get(key)
            if cached is None:
                return None
            expires_at, value = cached
            if expires_at <= now:
                self._entries.pop(key, None)
                return None
            return value

    def set(self, key: Hashable, value: T) -> None:
        if self.ttl_seconds <= 0:
            return
        expires_at = time.monotonic() + self.ttl_seconds
        with self._lock:
            self._entries[key] = (expires_at, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
