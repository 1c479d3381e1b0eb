"""In-memory rate limiter.

Notes:
- Per-process only: every server instance keeps independent counters.
- Thread-safe: a lock guards the shared map.
- Bounded opportunistically: once more than ``max_tracked_keys`` clients are
  tracked, windows that already ended are purged before the next insert.
  This is not a hard cap; a burst of live clients can still exceed it.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from restaurant_picker.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

DEFAULT_MAX_TRACKED_KEYS = 10_000


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter(AbstractRateLimiter):
    """Counter per key whose window starts at the key's first request.

    A window opens when a key is first seen (or its previous window has
    ended) and lasts ``window_seconds``. Every request inside the window
    increments the count; a request is allowed while the count stays within
    ``max_requests``. Blocked requests still count.
    """

    def __init__(
        self,
        *,
        max_tracked_keys: int = DEFAULT_MAX_TRACKED_KEYS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_tracked_keys: Map size above which expired windows are purged.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If max_tracked_keys is negative.
        """
        if max_tracked_keys < 0:
            raise ValueError("max_tracked_keys must be >= 0")

        self._max_tracked_keys = max_tracked_keys
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[str, _Window] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _purge_expired_locked(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]

    def check(self, key: str, *, max_requests: int, window_seconds: float) -> RateLimitResult:
        """Count one request for ``key``.

        Raises:
            ValueError: If max_requests or window_seconds are not positive.
        """
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        now = self._clock()

        with self._lock:
            if len(self._windows) > self._max_tracked_keys:
                self._purge_expired_locked(now)

            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                window = _Window(count=1, reset_at=now + window_seconds)
                self._windows[key] = window
                return RateLimitResult(
                    allowed=True,
                    remaining=max_requests - 1,
                    reset_at=window.reset_at,
                )

            window.count += 1
            if window.count > max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=window.reset_at,
                    retry_after_seconds=max(0, math.ceil(window.reset_at - now)),
                )

            return RateLimitResult(
                allowed=True,
                remaining=max_requests - window.count,
                reset_at=window.reset_at,
            )
