"""TradingView Signal Relay – FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from signal_relay.config import settings
from signal_relay.modules.redis_client import close_redis
from signal_relay.routers import status, webhook
from signal_relay.schemas.webhook import ErrorResponse
from signal_relay.utils.logging import get_logger, setup_logging

setup_logging(log_level=settings.log_level, json_output=settings.log_json)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    log.info(
        "startup",
        env=settings.app_env,
        auth_enabled=bool(settings.webhook_secret),
        forwarding=bool(settings.vessel_url),
        store_raw=settings.store_raw,
    )
    yield
    await close_redis()
    log.info("shutdown")


app = FastAPI(
    title="TradingView Signal Relay",
    version="1.0.0",
    description="Authenticates, normalizes, stores and forwards TradingView alerts",
    lifespan=lifespan,
)

# ── Routers ──────────────────────────────────────────
app.include_router(webhook.router, tags=["webhook"])
app.include_router(status.router, tags=["health"])


# ── Exception handlers ──────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content=ErrorResponse(error="method_not_allowed").model_dump(),
            headers=exc.headers,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_exception", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content=ErrorResponse(error="server_error").model_dump())


def run() -> None:
    """Serve the app with uvicorn (``signal-relay`` console script)."""
    uvicorn.run(
        "signal_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
