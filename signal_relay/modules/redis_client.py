"""Async Redis connection pools, one per URL, created on first use."""

from __future__ import annotations

import redis.asyncio as aioredis

from signal_relay.utils.logging import get_logger

log = get_logger(__name__)

_pools: dict[str, aioredis.Redis] = {}


def _safe_url(url: str) -> str:
    """Drop credentials before logging."""
    return url.split("@")[-1]


async def get_redis(url: str) -> aioredis.Redis:
    pool = _pools.get(url)
    if pool is None:
        pool = aioredis.from_url(url, decode_responses=True, max_connections=20)
        _pools[url] = pool
        await log.ainfo("redis_connected", url=_safe_url(url))
    return pool


async def close_redis() -> None:
    while _pools:
        url, pool = _pools.popitem()
        await pool.aclose()
        await log.ainfo("redis_closed", url=_safe_url(url))


async def redis_ping(url: str) -> bool:
    try:
        r = await get_redis(url)
        return await r.ping()  # type: ignore[return-value]
    except Exception as e:
        log.warning("redis_ping_failed", url=_safe_url(url), error=str(e))
        return False
