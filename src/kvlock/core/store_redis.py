"""Redis-backed store using SET NX PX and Lua compare-and-act scripts."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from .errors import StoreUnavailable
from .store import KeyValueStore

if TYPE_CHECKING:
    from .settings import LockSettings


_DELETE_IF_VALUE = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
else
    return 0
end
"""

_EXPIRE_IF_PERSISTENT = """
if redis.call('pttl', KEYS[1]) == -1 then
    return redis.call('pexpire', KEYS[1], ARGV[1])
else
    return 0
end
"""

_EXPIRE_IF_VALUE = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('pexpire', KEYS[1], ARGV[2])
else
    return 0
end
"""


@asynccontextmanager
async def _store_call(op: str, key: str) -> AsyncIterator[None]:
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as exc:
        raise StoreUnavailable(f"redis {op} on {key!r} failed: {exc}") from exc


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: Optional[float] = None) -> "RedisKeyValueStore":
        return cls(
            Redis.from_url(
                url,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
        )

    @classmethod
    def from_settings(cls, settings: "LockSettings") -> "RedisKeyValueStore":
        return cls.from_url(settings.redis_url, socket_timeout=settings.socket_timeout_seconds)

    async def create_if_absent(self, key: str, value: str) -> bool:
        async with _store_call("setnx", key):
            return bool(await self._redis.set(key, value, nx=True))

    async def create_if_absent_with_ttl(self, key: str, value: str, ttl_ms: int) -> bool:
        async with _store_call("set", key):
            return bool(await self._redis.set(key, value, px=ttl_ms, nx=True))

    async def delete(self, key: str) -> bool:
        async with _store_call("del", key):
            return await self._redis.delete(key) > 0

    async def delete_if_value(self, key: str, value: str) -> bool:
        async with _store_call("eval", key):
            return bool(await self._redis.eval(_DELETE_IF_VALUE, 1, key, value))

    async def exists(self, key: str) -> bool:
        async with _store_call("exists", key):
            return await self._redis.exists(key) > 0

    async def get(self, key: str) -> Optional[str]:
        async with _store_call("get", key):
            value = await self._redis.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def get_ttl(self, key: str) -> Optional[int]:
        async with _store_call("pttl", key):
            remaining = await self._redis.pttl(key)
        # -2: no such key, -1: key without expiry
        if remaining < 0:
            return None
        return int(remaining)

    async def set_ttl(self, key: str, ttl_ms: int) -> bool:
        async with _store_call("pexpire", key):
            return bool(await self._redis.pexpire(key, ttl_ms))

    async def set_ttl_if_missing(self, key: str, ttl_ms: int) -> bool:
        async with _store_call("eval", key):
            return bool(await self._redis.eval(_EXPIRE_IF_PERSISTENT, 1, key, ttl_ms))

    async def expire_if_value(self, key: str, value: str, ttl_ms: int) -> bool:
        async with _store_call("eval", key):
            return bool(await self._redis.eval(_EXPIRE_IF_VALUE, 1, key, value, ttl_ms))

    async def close(self) -> None:
        await self._redis.aclose()
