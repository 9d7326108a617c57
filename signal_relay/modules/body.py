"""Raw request body capture for signature verification.

HMAC only means something over the exact bytes the sender signed, so the
handler reads the stream itself instead of relying on a parsed body.  Two
edge cases are handled here:
  - a client that never sends a chunk: wait a short window, then give up
  - a stream already consumed upstream: fall back to the body that layer
    parsed (``request.state.parsed_body``) and re-serialize it
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from starlette.requests import ClientDisconnect, Request

from signal_relay.utils.logging import get_logger

log = get_logger(__name__)


class InvalidPayload(Exception):
    """Raw body is not valid JSON."""


async def capture_raw_body(request: Request, timeout: float) -> bytes:
    """Read the whole body, or return ``b""`` if the first chunk doesn't arrive in *timeout* seconds."""
    cached = getattr(request, "_body", None)
    if isinstance(cached, bytes):
        return cached

    try:
        stream = request.stream()
        try:
            first = await asyncio.wait_for(stream.__anext__(), timeout=timeout)
        except StopAsyncIteration:
            return b""
        except asyncio.TimeoutError:
            log.warning("body_read_timeout", timeout_ms=int(timeout * 1000))
            return b""

        chunks = [first]
        async for chunk in stream:
            chunks.append(chunk)
    except RuntimeError:
        # "Stream consumed": an upstream layer already read the body.
        return b""
    except ClientDisconnect:
        return b""

    body = b"".join(chunks)
    request._body = body
    return body


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_payload(raw_body: bytes, parsed_body: Any = None) -> tuple[Any, bytes]:
    """Decode the body, returning ``(payload, raw_bytes_for_hmac)``.

    With no raw bytes, a pre-parsed body is used and re-serialized.  Those
    bytes won't necessarily match what the sender signed, so HMAC checks on
    that path can fail for honest senders.
    """
    if raw_body:
        try:
            return json.loads(raw_body, parse_constant=_reject_constant), raw_body
        except (ValueError, RecursionError) as e:
            raise InvalidPayload(str(e)) from e

    if parsed_body is not None:
        try:
            rebuilt = json.dumps(parsed_body, separators=(",", ":"), ensure_ascii=False).encode()
        except (TypeError, ValueError, RecursionError):
            rebuilt = b""
        log.warning("raw_body_reconstructed", length=len(rebuilt))
        return parsed_body, rebuilt

    return {}, b""
