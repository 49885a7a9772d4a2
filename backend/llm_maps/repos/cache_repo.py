"""
In-memory response cache with per-entry expiration.
Used to skip redundant provider and classifier calls for identical queries.
Expired entries are swept on every write and the store never holds more
than max_entries; the oldest write is dropped first.
"""
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from llm_maps.core.logger import logs


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class ResponseCache:
    """Repository for short-lived responses kept in process memory."""

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, replacing any previous entry for the key."""
        now = self._clock()
        expires_at = now + (self.ttl if ttl is None else ttl)
        with self._lock:
            self._evict_expired(now)
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)
            while len(self._entries) > self.max_entries:
                oldest, _ = self._entries.popitem(last=False)
                logs.log(logging.DEBUG, f"Cache full, dropped oldest entry: {oldest}")

    def get(self, key: str) -> Any:
        """Return the cached value, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                del self._entries[key]
                logs.log(logging.DEBUG, f"Cache entry expired: {key}")
                return None
            return entry.value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Evict every expired entry and return how many were removed."""
        with self._lock:
            removed = self._evict_expired(self._clock())
        if removed:
            logs.log(logging.INFO, f"Evicted {removed} expired cache entries")
        return removed

    def _evict_expired(self, now: float) -> int:
        # Caller holds the lock
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
