"""Pytest fixtures for Signal Relay tests."""

from __future__ import annotations

import json
import os
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# Override settings before importing app
os.environ.pop("WEBHOOK_SECRET", None)
os.environ.pop("VESSEL_URL", None)
os.environ["REDIS_URL"] = "redis://localhost:6379/1"
os.environ["LOG_JSON"] = "false"

TEST_SECRET = "test_secret"


class FakeRedis:
    """In-memory fake Redis for tests – no real Redis required."""

    def __init__(self) -> None:
        self._data: dict[str, list[str]] = {}

    async def ping(self) -> bool:
        return True

    async def rpush(self, key: str, *values: str) -> int:
        lst = self._data.setdefault(key, [])
        lst.extend(values)
        return len(lst)

    async def ltrim(self, key: str, start: int, stop: int) -> None:
        val = self._data.get(key)
        if val is None:
            return
        length = len(val)
        s = max(length + start, 0) if start < 0 else start
        e = (length + stop) if stop < 0 else stop
        self._data[key] = val[s : e + 1]

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        val = self._data.get(key, [])
        length = len(val)
        s = max(length + start, 0) if start < 0 else start
        e = (length + end) if end < 0 else end
        return val[s : e + 1]

    async def llen(self, key: str) -> int:
        return len(self._data.get(key, []))

    async def aclose(self) -> None:
        pass


_fake_redis = FakeRedis()


@pytest.fixture(autouse=True)
def reset_fake_redis():
    _fake_redis._data.clear()


@pytest.fixture
def fake_redis():
    """Expose FakeRedis for direct unit tests."""
    return _fake_redis


@pytest.fixture
def settings():
    """Per-test settings; tests mutate fields (webhook_secret, vessel_url, ...) as needed."""
    from signal_relay.config import Settings

    return Settings(_env_file=None, webhook_secret=None, vessel_url=None, store_raw=False)


@pytest.fixture
def forward_mock():
    return AsyncMock(return_value=True)


@pytest.fixture
async def client(settings, forward_mock):
    """Async test client backed by FakeRedis, with forwarding patched out."""
    from signal_relay.dependencies import get_settings, get_signal_store
    from signal_relay.main import app
    from signal_relay.modules.signal_store import SignalStore

    async def _store() -> SignalStore:
        return SignalStore(_fake_redis, key=settings.signals_key, max_items=settings.signals_max)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_signal_store] = _store

    with (
        patch("signal_relay.modules.redis_client.get_redis", AsyncMock(return_value=_fake_redis)),
        patch("signal_relay.routers.webhook.forward_signal", forward_mock),
    ):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    app.dependency_overrides.clear()


def make_payload(
    ticker: str | None = "BINANCE:ETHUSDT",
    action: str | None = "buy",
    secret: str | None = None,
    **extra,
) -> dict:
    payload: dict = {"interval": "15", "price": "3521.50", "time": "2024-05-01T12:00:00Z"}
    if ticker is not None:
        payload["ticker"] = ticker
    if action is not None:
        payload["action"] = action
    if secret is not None:
        payload["secret"] = secret
    payload.update(extra)
    return payload


async def seed_signals(fake_redis: FakeRedis, count: int, key: str = "tv:signals") -> None:
    """Push *count* stored records, oldest first (sym0 is the oldest)."""
    for i in range(count):
        await fake_redis.rpush(key, json.dumps({"id": f"id{i}", "symbol": f"sym{i}", "source": "tradingview"}))
