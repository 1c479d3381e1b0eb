"""Unit tests for the in-memory rate limiter adapter."""

from unittest.mock import Mock

import pytest

from restaurant_picker.adapters.rate_limit.in_memory import InMemoryRateLimiter


def _check(limiter: InMemoryRateLimiter, key: str = "k", max_requests: int = 5, window_seconds: float = 60):
    return limiter.check(key, max_requests=max_requests, window_seconds=window_seconds)


def test_first_request_opens_window() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRateLimiter(clock=clock)

    result = _check(limiter)

    assert result.allowed is True
    assert result.remaining == 4
    assert result.reset_at == 1060.0
    assert result.retry_after_seconds is None


def test_allows_up_to_limit_then_blocks() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRateLimiter(clock=clock)

    results = [_check(limiter) for _ in range(5)]
    assert all(r.allowed for r in results)
    assert [r.remaining for r in results] == [4, 3, 2, 1, 0]

    blocked = _check(limiter)
    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.retry_after_seconds == 60


def test_window_is_anchored_to_first_request() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRateLimiter(clock=clock)

    assert _check(limiter, max_requests=1).allowed is True

    clock.return_value = 1059.5
    blocked = _check(limiter, max_requests=1)
    assert blocked.allowed is False
    assert blocked.retry_after_seconds == 1

    # the window only resets once now is strictly past reset_at
    clock.return_value = 1060.0
    assert _check(limiter, max_requests=1).allowed is False

    clock.return_value = 1060.001
    reopened = _check(limiter, max_requests=1)
    assert reopened.allowed is True
    assert reopened.reset_at == pytest.approx(1120.001)


def test_isolated_by_key() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRateLimiter(clock=clock)

    assert _check(limiter, "k1", max_requests=1).allowed is True
    assert _check(limiter, "k1", max_requests=1).allowed is False

    assert _check(limiter, "k2", max_requests=1).allowed is True


def test_purges_expired_windows_only_above_threshold() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRateLimiter(max_tracked_keys=2, clock=clock)

    for key in ("a", "b", "c"):
        _check(limiter, key, window_seconds=10)
    assert len(limiter) == 3

    clock.return_value = 1005.0
    _check(limiter, "d", window_seconds=10)
    # above the threshold but nothing has expired yet: no hard cap
    assert len(limiter) == 4

    clock.return_value = 1011.0
    _check(limiter, "e", window_seconds=10)
    # a, b, c expired and were purged before "e" was inserted
    assert len(limiter) == 2


def test_below_threshold_expired_entries_are_kept() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRateLimiter(max_tracked_keys=10, clock=clock)

    _check(limiter, "a", window_seconds=1)
    clock.return_value = 2000.0
    _check(limiter, "b", window_seconds=1)

    assert len(limiter) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_requests": 0, "window_seconds": 60},
        {"max_requests": 1, "window_seconds": 0},
    ],
)
def test_invalid_check_args(kwargs: dict) -> None:
    limiter = InMemoryRateLimiter()

    with pytest.raises(ValueError):
        limiter.check("k", **kwargs)


def test_invalid_constructor_args() -> None:
    with pytest.raises(ValueError):
        InMemoryRateLimiter(max_tracked_keys=-1)
