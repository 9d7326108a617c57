"""Webhook request, normalized signal & stored record schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IncomingPayload(BaseModel):
    """Raw TradingView alert body.

    Alert templates are free-form, so every known key is optional and any
    JSON value is accepted as-is.  Unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow")

    action: Any = None
    signal: Any = None
    type: Any = None
    ticker: Any = None
    symbol: Any = None
    interval: Any = None
    price: Any = None
    close: Any = None
    time: Any = None
    secret: Any = None

    @classmethod
    def from_json(cls, value: Any) -> IncomingPayload:
        """Wrap a decoded JSON value; anything but an object becomes an empty payload."""
        if isinstance(value, dict):
            return cls.model_validate(value)
        return cls()


class NormalizedSignal(BaseModel):
    """Compact signal: what gets forwarded downstream."""

    model_config = ConfigDict(frozen=True)

    source: str
    recv_at: str
    action: Any = None
    signal: Any = None
    symbol: Any = None
    interval: Any = None
    price: Any = None
    time: Any = None


class SignalRecord(BaseModel):
    """Row persisted in the signal store."""

    id: str
    created_at: str
    source: str
    symbol: Any = None
    action: Any = None
    signal: Any = None
    interval: Any = None
    price: Any = None
    time: Any = None
    raw: dict[str, Any] | None = None


class AuthContext(BaseModel):
    """Everything the authenticity check looks at, for a single request."""

    raw_body: bytes = b""
    header_token: str | None = None
    header_signature: str | None = None
    body_secret: Any = None
    secret: str


class IngestResponse(BaseModel):
    ok: bool = True
    saved: bool = True
    symbol: Any = None
    action: Any = None


class SignalListResponse(BaseModel):
    ok: bool = True
    count: int
    data: list[dict[str, Any]] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
