"""Rate limiting adapters.

This package provides a small abstraction layer so the in-memory limiter can
later be replaced by a shared store without changing the routing layer.
"""

from asset_server.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from asset_server.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
