"""Execution locks that keep scheduled subscription syncs from overlapping."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from time import monotonic

from redis.asyncio import Redis

from src.config import get_settings

KEY_PREFIX = "estate-hub:dedup"

# Used instead of Redis when TASKIQ_TESTING is on.
_MEMORY_LOCKS: dict[str, float] = {}


def build_dedup_key(*, scope: str, task_name: str, fingerprint: str) -> str:
    return f"{KEY_PREFIX}:{scope}:{task_name}:{fingerprint}"


@asynccontextmanager
async def _redis() -> AsyncIterator[Redis]:
    client = Redis.from_url(
        get_settings().redis_url, encoding="utf-8", decode_responses=True
    )
    try:
        yield client
    finally:
        await client.aclose()


def _claim_in_memory(key: str, ttl_seconds: int) -> bool:
    now = monotonic()
    for held_key, expires_at in list(_MEMORY_LOCKS.items()):
        if expires_at <= now:
            del _MEMORY_LOCKS[held_key]
    if key in _MEMORY_LOCKS:
        return False
    _MEMORY_LOCKS[key] = now + ttl_seconds
    return True


async def acquire_dedup_lock(key: str, ttl_seconds: int) -> bool:
    """Claim ``key`` for ``ttl_seconds`` (SET NX EX); False if already held."""

    if get_settings().taskiq_testing:
        return _claim_in_memory(key, ttl_seconds)

    async with _redis() as client:
        return bool(await client.set(key, "1", nx=True, ex=ttl_seconds))


async def release_dedup_lock(key: str) -> None:
    if get_settings().taskiq_testing:
        _MEMORY_LOCKS.pop(key, None)
        return

    async with _redis() as client:
        await client.delete(key)


@asynccontextmanager
async def dedup_lock(key: str, ttl_seconds: int) -> AsyncIterator[bool]:
    """Hold the lock for the block; yields False when another run holds it."""

    acquired = await acquire_dedup_lock(key, ttl_seconds)
    try:
        yield acquired
    finally:
        if acquired:
            await release_dedup_lock(key)
