from __future__ import annotations

from typing import Callable

import fakeredis
import pytest

from kvlock.core.client import LockClient
from kvlock.core.store_memory import InMemoryKeyValueStore
from kvlock.core.store_redis import RedisKeyValueStore


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000.0


CallerFactory = Callable[[], LockClient]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def redis_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


def _redis_caller(server: fakeredis.FakeServer) -> LockClient:
    redis = fakeredis.FakeAsyncRedis(server=server, decode_responses=True)
    return LockClient(RedisKeyValueStore(redis))


@pytest.fixture(params=["memory", "redis"])
def new_caller(request, memory_store, redis_server) -> CallerFactory:
    """Factory of independent callers that share one store."""
    def factory() -> LockClient:
        if request.param == "memory":
            return LockClient(memory_store)
        return _redis_caller(redis_server)

    return factory


@pytest.fixture
def redis_caller(redis_server) -> CallerFactory:
    return lambda: _redis_caller(redis_server)
