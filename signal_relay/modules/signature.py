"""Shared-secret authentication for inbound webhooks.

Three strategies, tried in order; the first that matches authorizes the
request:
  1. HMAC-SHA256 signature header over the exact raw body
  2. plain token header equal to the secret
  3. ``secret`` field inside the JSON body equal to the secret
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

from signal_relay.schemas.webhook import AuthContext

SIGNATURE_HEADERS = ("x-tv-signature", "x-signature", "x-hub-signature-256", "x-hub-signature")
TOKEN_HEADERS = ("x-tv-secret", "x-secret")

_SIG_PREFIX = "sha256="


def compute_signature(secret: str | bytes, body: bytes) -> str:
    """Hex HMAC-SHA256 of *body* keyed by *secret*."""
    key = secret.encode() if isinstance(secret, str) else secret
    return hmac.new(key, body, hashlib.sha256).hexdigest()


def verify_hmac(raw_body: bytes, secret: str, header_sig: str | None) -> bool:
    """Constant-time check of a ``sha256=<hex>`` or bare hex signature.

    Never raises: bad hex or a digest of the wrong length is simply a mismatch.
    """
    if not secret or not header_sig or not raw_body:
        return False
    sig = header_sig.strip()
    if sig.startswith(_SIG_PREFIX):
        sig = sig[len(_SIG_PREFIX):]
    try:
        expected = bytes.fromhex(compute_signature(secret, raw_body))
        given = bytes.fromhex(sig)
    except ValueError:
        return False
    if len(expected) != len(given):
        return False
    return hmac.compare_digest(expected, given)


def _secret_equals(candidate: Any, secret: str) -> bool:
    if not isinstance(candidate, str) or not candidate:
        return False
    return hmac.compare_digest(candidate.encode(), secret.encode())


def is_authorized(ctx: AuthContext) -> bool:
    if ctx.header_signature and verify_hmac(ctx.raw_body, ctx.secret, ctx.header_signature):
        return True
    if _secret_equals(ctx.header_token, ctx.secret):
        return True
    return _secret_equals(ctx.body_secret, ctx.secret)


def first_header(headers: Any, names: tuple[str, ...]) -> str | None:
    """Value of the first header in *names* that is present and non-empty."""
    for name in names:
        value = headers.get(name)
        if value:
            return value
    return None
