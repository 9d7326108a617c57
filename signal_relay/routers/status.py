"""GET /status – health check endpoint."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from signal_relay.config import Settings
from signal_relay.dependencies import get_settings
from signal_relay.modules.redis_client import redis_ping

router = APIRouter()


class StatusResponse(BaseModel):
    status: str
    redis_ok: bool
    uptime_seconds: int


_start_time = time.time()


@router.get("/status", response_model=StatusResponse)
async def status(cfg: Settings = Depends(get_settings)) -> StatusResponse:
    redis_ok = await redis_ping(cfg.redis_url)
    return StatusResponse(
        status="ok" if redis_ok else "degraded",
        redis_ok=redis_ok,
        uptime_seconds=int(time.time() - _start_time),
    )
