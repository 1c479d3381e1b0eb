"""Rate limiter interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the request may proceed.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX time (seconds, fractional) when the window ends.
        retry_after_seconds: Whole seconds to wait when blocked, else None.
    """

    allowed: bool
    remaining: int
    reset_at: float
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for per-client request counters."""

    @abstractmethod
    def check(self, key: str, *, max_requests: int, window_seconds: float) -> RateLimitResult:
        """Count one request for ``key`` and decide whether it is allowed.

        Args:
            key: Client identifier (network address or a shared fallback bucket).
            max_requests: Requests allowed per window.
            window_seconds: Window length, started by the first request.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError
