"""In-process store with lazy TTL expiry."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .store import KeyValueStore


Clock = Callable[[], float]


@dataclass(slots=True)
class _Entry:
    value: str
    expires_at: Optional[float] = None


class InMemoryKeyValueStore(KeyValueStore):
    """Single-process stand-in for a shared store.

    Expiry is checked against ``clock()`` (seconds) on every access, so tests
    can move time forward without sleeping.
    """

    def __init__(self, *, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    def _deadline(self, ttl_ms: int) -> float:
        return self._clock() + ttl_ms / 1000.0

    async def create_if_absent(self, key: str, value: str) -> bool:
        async with self._lock:
            if self._live(key) is not None:
                return False
            self._entries[key] = _Entry(value)
            return True

    async def create_if_absent_with_ttl(self, key: str, value: str, ttl_ms: int) -> bool:
        async with self._lock:
            if self._live(key) is not None:
                return False
            self._entries[key] = _Entry(value, self._deadline(ttl_ms))
            return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if self._live(key) is None:
                return False
            del self._entries[key]
            return True

    async def delete_if_value(self, key: str, value: str) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry.value != value:
                return False
            del self._entries[key]
            return True

    async def exists(self, key: str) -> bool:
        async with self._lock:
            return self._live(key) is not None

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._live(key)
            return entry.value if entry else None

    async def get_ttl(self, key: str) -> Optional[int]:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry.expires_at is None:
                return None
            return max(0, int(round((entry.expires_at - self._clock()) * 1000)))

    async def set_ttl(self, key: str, ttl_ms: int) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return False
            entry.expires_at = self._deadline(ttl_ms)
            return True

    async def set_ttl_if_missing(self, key: str, ttl_ms: int) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry.expires_at is not None:
                return False
            entry.expires_at = self._deadline(ttl_ms)
            return True

    async def expire_if_value(self, key: str, value: str, ttl_ms: int) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry.value != value:
                return False
            entry.expires_at = self._deadline(ttl_ms)
            return True
