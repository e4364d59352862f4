"""Core lock primitives and store backends."""

from .client import LockClient
from .errors import LockError, StoreUnavailable
from .models import Lease
from .settings import LockSettings
from .store import KeyValueStore
from .store_memory import InMemoryKeyValueStore
from .store_redis import RedisKeyValueStore

__all__ = [
    "LockClient",
    "LockError",
    "StoreUnavailable",
    "Lease",
    "LockSettings",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]
