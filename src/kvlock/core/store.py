"""Abstract interface for the key-value store backing the locks."""

from __future__ import annotations

import abc
from typing import Optional


class KeyValueStore(abc.ABC):
    """Store operations the lock protocol relies on.

    Durations are integer milliseconds. Every conditional operation must be
    atomic on the store side.
    """

    @abc.abstractmethod
    async def create_if_absent(self, key: str, value: str) -> bool:  # pragma: no cover - interface
        """Create ``key`` only if it does not exist."""
        raise NotImplementedError

    @abc.abstractmethod
    async def create_if_absent_with_ttl(self, key: str, value: str, ttl_ms: int) -> bool:  # pragma: no cover - interface
        """Create ``key`` with an expiry in one atomic step."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:  # pragma: no cover - interface
        """Delete ``key``; True if something was removed."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_if_value(self, key: str, value: str) -> bool:  # pragma: no cover - interface
        """Delete ``key`` only while it still holds ``value``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def exists(self, key: str) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    @abc.abstractmethod
    async def get_ttl(self, key: str) -> Optional[int]:  # pragma: no cover - interface
        """Remaining time to live, or None if the key is absent or never expires."""
        raise NotImplementedError

    @abc.abstractmethod
    async def set_ttl(self, key: str, ttl_ms: int) -> bool:  # pragma: no cover - interface
        """Install an expiry on an existing key; False when the key is absent."""
        raise NotImplementedError

    @abc.abstractmethod
    async def set_ttl_if_missing(self, key: str, ttl_ms: int) -> bool:  # pragma: no cover - interface
        """Install an expiry only on an existing key that has none, atomically."""
        raise NotImplementedError

    @abc.abstractmethod
    async def expire_if_value(self, key: str, value: str, ttl_ms: int) -> bool:  # pragma: no cover - interface
        """Reset the expiry of ``key`` only while it still holds ``value``."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources."""
