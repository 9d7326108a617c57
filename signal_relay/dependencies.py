"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Depends

from signal_relay.config import Settings, settings
from signal_relay.modules.redis_client import get_redis
from signal_relay.modules.signal_store import SignalStore


def get_settings() -> Settings:
    return settings


async def get_signal_store(cfg: Settings = Depends(get_settings)) -> SignalStore:
    r = await get_redis(cfg.redis_url)
    return SignalStore(r, key=cfg.signals_key, max_items=cfg.signals_max)
