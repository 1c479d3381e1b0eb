"""Rate limiting dependency for the authentication endpoint.

Login attempts are counted per client network address. The address comes
from the edge proxy header (``CF-Connecting-IP`` by default), then the
socket peer. Requests with neither share the ``unknown`` bucket, so
anonymous clients throttle each other.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone

from fastapi import Depends, Request

from restaurant_picker.adapters.rate_limit.base import AbstractRateLimiter
from restaurant_picker.adapters.rate_limit.in_memory import InMemoryRateLimiter
from restaurant_picker.core.config import settings
from restaurant_picker.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

_limiter: AbstractRateLimiter | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide limiter, creating it on first use."""

    global _limiter
    if _limiter is None:
        _limiter = InMemoryRateLimiter()
    return _limiter


def client_key(request: Request) -> str:
    """Identify the client for rate limiting purposes."""

    forwarded = request.headers.get(settings.auth.client_ip_header)
    if forwarded:
        return forwarded.strip()
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _hash_key(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_auth_rate_limit(
    request: Request,
    limiter: AbstractRateLimiter = Depends(get_rate_limiter),
) -> None:
    """FastAPI dependency limiting login attempts per client.

    Raises:
        RateLimitAppError: 429 with ``Retry-After`` once the budget is spent.
    """
    key = client_key(request)
    result = limiter.check(
        key,
        max_requests=settings.auth.rate_limit_requests,
        window_seconds=settings.auth.rate_limit_window_seconds,
    )

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={"key_hash": _hash_key(key), "remaining": result.remaining},
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_key(key),
            "limit": settings.auth.rate_limit_requests,
            "window_s": settings.auth.rate_limit_window_seconds,
            "retry_after_s": retry_after,
        },
    )
    raise RateLimitAppError(
        code="rate_limited",
        message="Too many authentication attempts. Please try again later.",
        details={"retry_after": retry_after},
        payload={
            "authenticated": False,
            "retryAfter": datetime.fromtimestamp(result.reset_at, tz=timezone.utc).isoformat(),
        },
    )
