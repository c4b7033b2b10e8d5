"""
Process-local cache for Slack user lookups.

Best-effort only: entries may disappear at any time and every process keeps
its own copy. Callers treat a miss as "ask Slack".
"""

import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Protocol

from chatbridge.settings import settings


class UserInfoCache(Protocol):
    """Interface the inbound handler uses to cache ``users.info`` results."""

    def get(self, key: str) -> tuple[Any, bool]:
        ...

    def put(self, key: str, value: Any, ttl: float) -> None:
        ...


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class MemoryTTLCache:
    """In-memory cache with a per-entry time to live."""

    def __init__(self, max_entries: int = 5000, clock=time.monotonic):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> tuple[Any, bool]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None, False
            return entry.value, True

    def put(self, key: str, value: Any, ttl: float) -> None:
        now = self._clock()
        with self._lock:
            if len(self._entries) >= self.max_entries and key not in self._entries:
                self._evict(now)
            self._entries[key] = CacheEntry(value=value, expires_at=now + ttl)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict(self, now: float) -> None:
        # Drop expired entries, then the oldest if still full
        for key in [k for k, e in self._entries.items() if e.expires_at <= now]:
            del self._entries[key]
        if len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k].expires_at)
            del self._entries[oldest]


class NullCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> tuple[Any, bool]:
        return None, False

    def put(self, key: str, value: Any, ttl: float) -> None:
        return None


def default_ttl() -> float:
    return float(settings.slack_user_cache_ttl_seconds)


# Global user cache
user_info_cache: UserInfoCache = MemoryTTLCache()
