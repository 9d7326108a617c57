"""Append-only signal log kept in a Redis list (RPUSH + LTRIM)."""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from signal_relay.schemas.webhook import SignalRecord


class SignalStoreError(Exception):
    """Storage backend failed or returned something undecodable."""


class SignalStore:
    def __init__(self, r: aioredis.Redis, key: str = "tv:signals", max_items: int = 5000) -> None:
        self.r = r
        self.key = key
        self.max_items = max_items

    async def insert(self, record: SignalRecord) -> None:
        try:
            await self.r.rpush(self.key, record.model_dump_json())
            await self.r.ltrim(self.key, -self.max_items, -1)
        except RedisError as e:
            raise SignalStoreError(str(e)) from e

    async def latest(self, limit: int) -> list[dict[str, Any]]:
        """Most recent *limit* records, newest first."""
        try:
            raw_list = await self.r.lrange(self.key, -limit, -1)
        except RedisError as e:
            raise SignalStoreError(str(e)) from e

        records: list[dict[str, Any]] = []
        for raw in reversed(raw_list):
            try:
                records.append(json.loads(raw))
            except (json.JSONDecodeError, TypeError) as e:
                raise SignalStoreError(f"corrupt record in {self.key}: {e}") from e
        return records
