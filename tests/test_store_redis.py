from __future__ import annotations

from unittest.mock import AsyncMock

import fakeredis
import pytest
from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from kvlock.core.client import LockClient
from kvlock.core.errors import LockError, StoreUnavailable
from kvlock.core.store_redis import RedisKeyValueStore


@pytest.mark.asyncio
async def test_unreachable_redis_raises_store_unavailable():
    # Port 1 refuses connections; no retries so the failure is immediate.
    redis = Redis(host="127.0.0.1", port=1, socket_connect_timeout=0.5, retry=Retry(NoBackoff(), 0))
    store = RedisKeyValueStore(redis)
    client = LockClient(store)
    try:
        with pytest.raises(StoreUnavailable):
            await client.acquire("res", 1000)
        with pytest.raises(StoreUnavailable):
            await client.probe("res")
        with pytest.raises(StoreUnavailable):
            await client.release("res")
    finally:
        await store.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [RedisConnectionError("reset"), RedisTimeoutError("slow")])
async def test_network_errors_map_to_store_unavailable(error):
    redis = AsyncMock()
    redis.set.side_effect = error
    client = LockClient(RedisKeyValueStore(redis))

    with pytest.raises(StoreUnavailable) as info:
        await client.acquire("res", 1000)
    assert info.value.__cause__ is error
    assert isinstance(info.value, LockError)


@pytest.mark.asyncio
async def test_other_redis_errors_propagate_unchanged():
    redis = AsyncMock()
    redis.exists.side_effect = ResponseError("WRONGTYPE")
    client = LockClient(RedisKeyValueStore(redis))

    with pytest.raises(ResponseError):
        await client.probe("res")


@pytest.mark.asyncio
async def test_acquire_is_one_atomic_set_with_expiry():
    redis = AsyncMock()
    redis.set.return_value = True
    lease = await LockClient(RedisKeyValueStore(redis)).try_acquire("res", 2500)

    redis.set.assert_awaited_once_with("res", lease.token, px=2500, nx=True)
    redis.pexpire.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_ttl_reports_none_for_absent_and_persistent_keys():
    redis = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    store = RedisKeyValueStore(redis)

    assert await store.get_ttl("absent") is None
    await store.create_if_absent("persistent", "v")
    assert await store.get_ttl("persistent") is None
    assert await store.set_ttl("persistent", 4000) is True
    assert 0 < await store.get_ttl("persistent") <= 4000
    assert await store.set_ttl("absent", 4000) is False


@pytest.mark.asyncio
async def test_get_decodes_bytes_responses():
    redis = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer())
    store = RedisKeyValueStore(redis)
    await store.create_if_absent_with_ttl("res", "token-1", 1000)

    assert await store.get("res") == "token-1"
    assert await store.delete_if_value("res", "token-2") is False
    assert await store.delete_if_value("res", "token-1") is True
    assert await store.get("res") is None
