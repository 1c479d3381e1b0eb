"""Rate limiting adapters.

The HTTP layer depends on ``AbstractRateLimiter`` only. The in-memory
implementation is the default for single-instance deployments; a shared
counter store (e.g. Redis with key expiry) can replace it for multi-instance
deployments without touching the routes.
"""

from restaurant_picker.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from restaurant_picker.adapters.rate_limit.in_memory import InMemoryRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryRateLimiter",
    "RateLimitResult",
]
