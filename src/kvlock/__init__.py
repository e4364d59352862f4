"""Distributed mutual exclusion on top of a TTL-capable key-value store."""

from .core import (
    InMemoryKeyValueStore,
    KeyValueStore,
    Lease,
    LockClient,
    LockError,
    LockSettings,
    RedisKeyValueStore,
    StoreUnavailable,
)

__all__ = [
    "__version__",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "Lease",
    "LockClient",
    "LockError",
    "LockSettings",
    "RedisKeyValueStore",
    "StoreUnavailable",
]

__version__ = "0.1.0"
