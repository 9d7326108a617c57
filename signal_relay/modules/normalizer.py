"""Normalize raw TradingView payloads into a compact NormalizedSignal.

Alert templates differ between users, so the same concept arrives under
different keys:
  - action  ← action | signal | type
  - symbol  ← ticker | symbol
  - price   ← price | close

Normalization never rejects a payload; missing keys become ``None``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from signal_relay.schemas.webhook import IncomingPayload, NormalizedSignal, SignalRecord

SOURCE = "tradingview"


def _first(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    # 0 and False are real values here (price 0 does not fall through to close).
    for value in values:
        if value is None or value == "":
            continue
        return value
    return None


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-01-02T03:04:05.678Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize(payload: IncomingPayload) -> NormalizedSignal:
    return NormalizedSignal(
        source=SOURCE,
        recv_at=utc_now_iso(),
        action=_first(payload.action, payload.signal, payload.type),
        signal=_first(payload.signal),
        symbol=_first(payload.ticker, payload.symbol),
        interval=_first(payload.interval),
        price=_first(payload.price, payload.close),
        time=_first(payload.time),
    )


def build_record(
    signal: NormalizedSignal,
    payload: IncomingPayload,
    store_raw: bool = False,
) -> SignalRecord:
    """Build the row to persist.  ``raw`` keeps the original payload minus its secret."""
    raw_data: dict[str, Any] | None = None
    if store_raw:
        sent = payload.model_fields_set | set(payload.model_extra or {})
        raw_data = {k: v for k, v in payload.model_dump().items() if k in sent and k != "secret"}

    return SignalRecord(
        id=uuid4().hex,
        created_at=utc_now_iso(),
        source=signal.source,
        symbol=signal.symbol,
        action=signal.action,
        signal=signal.signal,
        interval=signal.interval,
        price=signal.price,
        time=signal.time,
        raw=raw_data,
    )
