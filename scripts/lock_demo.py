"""CLI entrypoint walking two callers through the lock lifecycle."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Optional

from kvlock.core.client import LockClient
from kvlock.core.settings import LockSettings
from kvlock.core.store import KeyValueStore
from kvlock.core.store_memory import InMemoryKeyValueStore
from kvlock.core.store_redis import RedisKeyValueStore
from kvlock.utils.logging import get_logger


logger = get_logger("LockDemo")


def _load_settings(path: Optional[Path]) -> LockSettings:
    if path is None:
        return LockSettings.from_env()
    return LockSettings.from_file(path)


async def run(store: KeyValueStore, settings: LockSettings, name: str) -> None:
    a = LockClient(store, key_prefix=settings.key_prefix, renew_every_ms=settings.renew_every_ms)
    b = LockClient(store, key_prefix=settings.key_prefix, renew_every_ms=settings.renew_every_ms)
    ttl = settings.default_ttl_ms

    logger.info("A acquire %s -> %s", name, await a.acquire(name, ttl))
    logger.info("B acquire %s -> %s", name, await b.acquire(name, ttl))
    logger.info("A release %s -> %s", name, await a.release(name))
    logger.info("B acquire %s -> %s", name, await b.acquire(name, ttl))
    await b.release(name)

    short = 1000
    logger.info("A acquire %s for %dms -> %s", name, short, await a.acquire(name, short))
    await asyncio.sleep(1.5)
    logger.info("B acquire %s after expiry -> %s", name, await b.acquire(name, short))
    await b.release(name)

    async with a.hold(name, ttl):
        logger.info("A holds %s for %dms, renewing every %sms", name, ttl, a.renew_every_ms)

    # Renewal past a short TTL.
    async with a.hold(name, short, renew_every_ms=short // 3) as lease:
        await asyncio.sleep(1.5)
        logger.info("B acquire %s while A renews -> %s", name, await b.acquire(name, short))
        logger.info("A lease lost: %s", lease.lost if lease else None)
    logger.info("Held after A's block: %s", await b.probe(name))


async def main() -> None:
    parser = argparse.ArgumentParser(description="Demonstrate the distributed lock protocol.")
    parser.add_argument("--config", type=Path, default=None, help="Path to lock settings YAML")
    parser.add_argument("--memory", action="store_true", help="Use the in-process store instead of Redis")
    parser.add_argument("--name", default="job:42", help="Lock name to contend on")
    args = parser.parse_args()

    settings = _load_settings(args.config)
    store: KeyValueStore
    if args.memory:
        store = InMemoryKeyValueStore()
    else:
        store = RedisKeyValueStore.from_settings(settings)
    try:
        await run(store, settings, args.name)
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
