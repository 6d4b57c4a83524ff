"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock serializes the read-modify-write of every window, so
  concurrent requests from the same client can never undercount.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from asset_server.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class _WindowState:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per key.

    A key's window opens with its first request and lasts ``window_seconds``;
    the first request after that opens a fresh window with a zero count.
    Denied requests do not consume budget.

    Important:
        This limiter is per-process only. If the server runs with multiple
        workers, each worker will enforce its own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed units per window.
            window_seconds: Size of the fixed window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}
        self._last_prune: float | None = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)

    def _is_expired(self, state: _WindowState, now: float) -> bool:
        return now - state.window_start >= self._window_seconds

    def _get_or_reset_state(self, key: str, now: float) -> _WindowState:
        """Get the current state for key or open a new window when it elapsed."""
        state = self._state_by_key.get(key)
        if state is None or self._is_expired(state, now):
            state = _WindowState(window_start=now, count=0)
            self._state_by_key[key] = state
        return state

    def _prune_expired_locked(self, now: float) -> None:
        """Drop elapsed windows, at most once per window duration."""
        if self._last_prune is not None and now - self._last_prune < self._window_seconds:
            return
        self._last_prune = now
        expired_keys = [k for k, s in self._state_by_key.items() if self._is_expired(s, now)]
        for key in expired_keys:
            del self._state_by_key[key]

    def _build_result(self, *, allowed: bool, state: _WindowState, now: float) -> RateLimitResult:
        reset_at = state.window_start + self._window_seconds
        reset_after = max(0, int(math.ceil(reset_at - now)))
        return RateLimitResult(
            allowed=allowed,
            limit=self._limit,
            window_seconds=self._window_seconds,
            remaining=max(0, self._limit - state.count),
            reset_at=reset_at,
            reset_after_seconds=reset_after,
            retry_after_seconds=None if allowed else reset_after,
        )

    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Consume rate limit budget for the provided key.

        This method both checks the current window usage and mutates the state
        if the request is allowed.

        Args:
            key: Unique identifier for rate limiting (e.g., client IP).
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty or cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            now = self._clock()
            self._prune_expired_locked(now)
            state = self._get_or_reset_state(key, now)

            if state.count + cost <= self._limit:
                state.count += cost
                return self._build_result(allowed=True, state=state, now=now)

            return self._build_result(allowed=False, state=state, now=now)
