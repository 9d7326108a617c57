"""GET/POST /webhook – TradingView signal receiver."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from signal_relay.config import Settings
from signal_relay.dependencies import get_settings, get_signal_store
from signal_relay.modules.body import InvalidPayload, capture_raw_body, parse_payload
from signal_relay.modules.forwarder import forward_signal
from signal_relay.modules.normalizer import build_record, normalize
from signal_relay.modules.signal_store import SignalStore, SignalStoreError
from signal_relay.modules.signature import (
    SIGNATURE_HEADERS,
    TOKEN_HEADERS,
    first_header,
    is_authorized,
)
from signal_relay.schemas.webhook import (
    AuthContext,
    ErrorResponse,
    IncomingPayload,
    IngestResponse,
    NormalizedSignal,
    SignalListResponse,
    SignalRecord,
)
from signal_relay.utils.logging import get_logger

log = get_logger(__name__)
router = APIRouter()

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _error(status_code: int, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=code).model_dump())


def parse_limit(raw: str | None) -> int:
    """``?n=`` → int in [1, MAX_LIMIT]; missing or non-numeric means DEFAULT_LIMIT."""
    try:
        n = int(raw) if raw is not None else DEFAULT_LIMIT
    except ValueError:
        n = DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, n))


async def _persist(store: SignalStore, record: SignalRecord) -> bool:
    """Best-effort insert: failures are logged, never raised."""
    try:
        await store.insert(record)
    except SignalStoreError as e:
        log.error("signal_persist_failed", record_id=record.id, error=str(e))
        return False
    return True


async def _forward(url: str, signal: NormalizedSignal, timeout: float) -> bool:
    """Best-effort relay: whatever goes wrong downstream, ingestion still succeeds."""
    try:
        return await forward_signal(url, signal, timeout=timeout)
    except Exception as e:
        log.error("signal_forward_failed", url=url, error=str(e) or type(e).__name__)
        return False


@router.get(
    "/webhook",
    response_model=SignalListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_signals(
    n: str | None = Query(None, description="How many recent signals (1-100)"),
    store: SignalStore = Depends(get_signal_store),
) -> SignalListResponse | JSONResponse:
    limit = parse_limit(n)
    try:
        data = await store.latest(limit)
    except SignalStoreError as e:
        log.error("fetch_latest_failed", error=str(e))
        return _error(500, "db_error")
    return SignalListResponse(count=len(data), data=data)


@router.post(
    "/webhook",
    response_model=IngestResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def ingest_signal(
    request: Request,
    cfg: Settings = Depends(get_settings),
    store: SignalStore = Depends(get_signal_store),
) -> IngestResponse | JSONResponse:
    # TradingView sends Content-Type: text/plain, so the body is read by hand
    raw_body = await capture_raw_body(request, timeout=cfg.body_read_timeout_ms / 1000)
    parsed_body = getattr(request.state, "parsed_body", None)
    try:
        body, raw_body = parse_payload(raw_body, parsed_body)
    except InvalidPayload as e:
        log.warning("invalid_json", error=str(e))
        return _error(400, "invalid_json")

    payload = IncomingPayload.from_json(body)

    # ── Shared-secret validation ─────────────────────
    if cfg.webhook_secret:
        ctx = AuthContext(
            raw_body=raw_body,
            header_token=first_header(request.headers, TOKEN_HEADERS),
            header_signature=first_header(request.headers, SIGNATURE_HEADERS),
            body_secret=payload.secret,
            secret=cfg.webhook_secret,
        )
        if not is_authorized(ctx):
            log.warning(
                "webhook_auth_failed",
                has_signature=ctx.header_signature is not None,
                has_token=ctx.header_token is not None,
                has_body_secret=ctx.body_secret is not None,
            )
            return _error(401, "invalid_secret")

    try:
        signal = normalize(payload)
        record = build_record(signal, payload, store_raw=cfg.store_raw)
        log.info("signal_received", symbol=signal.symbol, action=signal.action, interval=signal.interval)

        # Acknowledgment reflects acceptance, not durable storage or delivery.
        await _persist(store, record)
        if cfg.vessel_url:
            await _forward(cfg.vessel_url, signal, cfg.forward_timeout_sec)

        return IngestResponse(symbol=signal.symbol, action=signal.action)
    except Exception as e:
        log.error("ingest_failed", error=str(e), exc_info=True)
        return _error(500, "server_error")
