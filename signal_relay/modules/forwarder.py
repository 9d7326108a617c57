"""Best-effort relay of normalized signals to the downstream (vessel) service."""

from __future__ import annotations

import httpx

from signal_relay.schemas.webhook import NormalizedSignal
from signal_relay.utils.logging import get_logger

log = get_logger(__name__)

FORWARDED_BY = "tv-webhook-relay"


async def forward_signal(
    url: str,
    signal: NormalizedSignal,
    timeout: float = 7.0,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """POST *signal* as JSON to *url* once.

    Returns False on network errors, timeouts, non-2xx responses and unusable
    URLs instead of raising; callers are not expected to retry.
    """
    headers = {"Content-Type": "application/json", "X-Forwarded-By": FORWARDED_BY}
    body = signal.model_dump(mode="json")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as c:
                resp = await c.post(url, json=body, headers=headers)
        else:
            resp = await client.post(url, json=body, headers=headers, timeout=timeout)
        resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.error("signal_forward_failed", url=url, error=str(e) or type(e).__name__)
        return False

    log.info("signal_forwarded", symbol=signal.symbol, status=resp.status_code)
    return True
