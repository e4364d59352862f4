"""Lock client: probe, acquire, extend and release named locks.

All lock state lives in the store as key/value/TTL triples. The client keeps
nothing between calls, so any number of tasks, processes or machines can
share one instance or hold their own.
"""

from __future__ import annotations

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from .errors import StoreUnavailable
from .models import Lease
from .settings import LockSettings
from .store import KeyValueStore
from .store_redis import RedisKeyValueStore
from kvlock.utils.logging import get_logger


def _require_name(name: str) -> None:
    if not name:
        raise ValueError("lock name must be a non-empty string")


def _require_ttl(ttl_ms: int, what: str = "ttl_ms") -> None:
    if ttl_ms <= 0:
        raise ValueError(f"{what} must be positive, got {ttl_ms}")


class LockClient:
    """Stateless facade over a :class:`KeyValueStore`.

    Contention is an ordinary outcome and is reported as ``False``/``None``.
    Store failures surface as :class:`StoreUnavailable` and mean the outcome
    is unknown.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key_prefix: str = "",
        renew_every_ms: Optional[int] = None,
    ) -> None:
        if renew_every_ms is not None:
            _require_ttl(renew_every_ms, "renew_every_ms")
        self.store = store
        self.key_prefix = key_prefix
        # Default renewal interval for hold(); None disables renewal.
        self.renew_every_ms = renew_every_ms
        self.logger = get_logger("LockClient")

    @classmethod
    def from_settings(cls, settings: LockSettings) -> "LockClient":
        return cls(
            RedisKeyValueStore.from_settings(settings),
            key_prefix=settings.key_prefix,
            renew_every_ms=settings.renew_every_ms,
        )

    def _key(self, name: str) -> str:
        _require_name(name)
        return f"{self.key_prefix}{name}"

    async def probe(self, name: str, ttl_ms: int = 0) -> bool:
        """Report whether ``name`` is held.

        With ``ttl_ms <= 0`` this is a pure read. With ``ttl_ms > 0`` a held
        lock that carries no expiry gets one of ``ttl_ms``; an existing expiry
        is never shortened or extended.
        """
        key = self._key(name)
        if ttl_ms > 0 and await self.store.set_ttl_if_missing(key, ttl_ms):
            self.logger.warning("Installed missing %dms TTL on lock %s during probe", ttl_ms, key)
        return await self.store.exists(key)

    async def try_acquire(
        self, name: str, ttl_ms: int, extend_on_contention: bool = False
    ) -> Optional[Lease]:
        """Create the lock with a fresh owner token, or return None if it is held."""
        key = self._key(name)
        _require_ttl(ttl_ms)
        token = uuid.uuid4().hex
        if await self.store.create_if_absent_with_ttl(key, token, ttl_ms):
            self.logger.debug("Acquired lock %s for %dms", key, ttl_ms)
            return Lease(name=name, token=token, ttl_ms=ttl_ms)

        self.logger.debug("Lock %s is held by another owner", key)
        if extend_on_contention and await self.store.set_ttl_if_missing(key, ttl_ms):
            self.logger.warning("Installed missing %dms TTL on contended lock %s", ttl_ms, key)
        return None

    async def acquire(self, name: str, ttl_ms: int, extend_on_contention: bool = False) -> bool:
        """True only when this call created the lock."""
        return await self.try_acquire(name, ttl_ms, extend_on_contention) is not None

    async def release(self, name: str, token: Optional[str] = None) -> bool:
        """Delete the lock and report whether a key was removed.

        With ``token`` the delete only happens while the lock still carries
        that token. Without it the delete is unconditional.
        """
        key = self._key(name)
        if token is None:
            removed = await self.store.delete(key)
        else:
            removed = await self.store.delete_if_value(key, token)
        self.logger.debug("Release of %s removed=%s", key, removed)
        return removed

    async def extend(self, name: str, token: str, ttl_ms: int) -> bool:
        """Reset the lock's TTL to ``ttl_ms`` if ``token`` still owns it."""
        key = self._key(name)
        _require_ttl(ttl_ms)
        return await self.store.expire_if_value(key, token, ttl_ms)

    async def owner(self, name: str) -> Optional[str]:
        """Token of the current holder, or None when the lock is free."""
        return await self.store.get(self._key(name))

    @asynccontextmanager
    async def hold(
        self,
        name: str,
        ttl_ms: int,
        *,
        renew_every_ms: Optional[int] = None,
        extend_on_contention: bool = False,
    ) -> AsyncIterator[Optional[Lease]]:
        """Hold ``name`` for the duration of an ``async with`` block.

        Yields None on contention. With ``renew_every_ms`` (defaulting to the
        client's interval) a background task keeps extending the lease until
        the block exits. The lease is released by token on every exit path.
        """
        if renew_every_ms is None:
            renew_every_ms = self.renew_every_ms
        if renew_every_ms is not None:
            _require_ttl(renew_every_ms, "renew_every_ms")
            if renew_every_ms >= ttl_ms:
                raise ValueError(
                    f"renew_every_ms ({renew_every_ms}) must be shorter than ttl_ms ({ttl_ms})"
                )
        lease = await self.try_acquire(name, ttl_ms, extend_on_contention)
        if lease is None:
            yield None
            return

        renewer: Optional[asyncio.Task[None]] = None
        if renew_every_ms is not None:
            renewer = asyncio.create_task(
                self._renew(lease, renew_every_ms), name=f"kvlock-renew-{name}"
            )
        try:
            yield lease
        finally:
            if renewer is not None:
                renewer.cancel()
                try:
                    await renewer
                except asyncio.CancelledError:
                    pass
                except Exception as exc:
                    self.logger.warning("Renewal task for %s died: %r", self._key(name), exc)
            if not await self.release(name, lease.token) and not lease.lost:
                self.logger.warning("Lock %s expired before release", self._key(name))

    async def _renew(self, lease: Lease, every_ms: int) -> None:
        while True:
            await asyncio.sleep(every_ms / 1000.0)
            try:
                extended = await self.extend(lease.name, lease.token, lease.ttl_ms)
            except StoreUnavailable as exc:
                self.logger.warning("Renewal of %s failed, retrying: %s", lease.name, exc)
                continue
            if not extended:
                lease.lost = True
                self.logger.warning("Lost lock %s; it expired or changed owner", lease.name)
                return

