"""Thread-safe in-memory TTL cache with lazy expiry and eviction hook."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

ExpireHook = Callable[[str, Any], None]


@dataclass
class CacheEntry:
    value: Any
    created_at: float
    ttl: float

    @property
    def expires_at(self) -> float:
        return self.created_at + self.ttl

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """Key/value store whose entries live for a fixed TTL from their last write.

    Reads never extend an entry's lifetime. Expired entries are evicted when
    next touched (or by ``purge_expired``), firing ``on_expire``.
    """

    def __init__(
        self,
        ttl_seconds: float,
        on_expire: ExpireHook | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl_seconds}")
        self.ttl = ttl_seconds
        self.on_expire = on_expire
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` for a live entry, else ``(None, False)``."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if not entry.is_expired(self._clock()):
                return entry.value, True
            del self._entries[key]
        self._notify_expired(key, entry)
        return None, False

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, created_at=self._clock(), ttl=self.ttl
            )

    def purge_expired(self) -> int:
        """Evict every expired entry. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [
                (key, entry)
                for key, entry in self._entries.items()
                if entry.is_expired(now)
            ]
            for key, _ in expired:
                del self._entries[key]
        for key, entry in expired:
            self._notify_expired(key, entry)
        return len(expired)

    def age(self, key: str) -> float | None:
        """Seconds since ``key`` was written, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            now = self._clock()
            if entry is None or entry.is_expired(now):
                return None
            return now - entry.created_at

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _notify_expired(self, key: str, entry: CacheEntry) -> None:
        logger.info("Cache entry %s expired after %.0fs", key, entry.ttl)
        if self.on_expire is not None:
            self.on_expire(key, entry.value)
