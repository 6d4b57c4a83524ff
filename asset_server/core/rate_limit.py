"""Rate limiting gate for single-file override routes.

This module wires the rate limiting adapter into the HTTP layer.

Rate limiting strategy:
- Fixed-window limit per client IP, shared across all single-file overrides.
- Every admitted or denied response carries the standard RateLimit-* headers
  so clients can self-throttle; denials add Retry-After.
- Directory overrides and the default static root are not gated.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import HTTPException, Request, status

from asset_server.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from asset_server.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

logger = logging.getLogger(__name__)


def build_rate_limiter(*, limit: int, window_seconds: int) -> AbstractRateLimiter:
    """Create the limiter guarding override files for one app instance."""

    return InMemoryFixedWindowRateLimiter(limit=limit, window_seconds=window_seconds)


def client_identity(request: Request) -> str:
    """Return the limiter key for the current request (the peer address)."""

    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Render the standard rate limit headers for a limiter decision."""

    headers = {
        "RateLimit-Policy": f"{result.limit};w={result.window_seconds}",
        "RateLimit-Limit": str(result.limit),
        "RateLimit-Remaining": str(result.remaining),
        "RateLimit-Reset": str(result.reset_after_seconds),
    }
    if not result.allowed:
        headers["Retry-After"] = str(result.retry_after_seconds or 0)
    return headers


def enforce_rate_limit(request: Request, limiter: AbstractRateLimiter) -> dict[str, str]:
    """Consume one unit of the requester's budget.

    Args:
        request: FastAPI request.
        limiter: Limiter owned by the application.

    Returns:
        dict[str, str]: Rate limit headers to attach to the asset response.

    Raises:
        HTTPException: 429 Too Many Requests when the quota is exhausted.
    """

    key = client_identity(request)
    result = limiter.consume(key)
    headers = rate_limit_headers(result)

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_limiter_key(key),
                "asset_path": request.url.path,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return headers

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "asset_path": request.url.path,
            "limit": result.limit,
            "window_s": result.window_seconds,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests, please try again later.",
        headers=headers,
    )
