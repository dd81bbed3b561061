"""
Per-client request limiting.

Fixed windows counted in process memory with the ``limits`` library. Each
application instance owns its own limiter, so counts are per process and
reset on restart.
"""

import math
import time
from dataclasses import dataclass
from datetime import timedelta

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter


@dataclass(frozen=True)
class RateLimitState:
    """Outcome of counting one request against a client's window."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: int

    def headers(self) -> dict[str, str]:
        """Standard ``RateLimit-*`` response headers."""
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class RateLimiter:
    """
    Fixed-window limiter keyed by client address.

    Usage:
        limiter = RateLimiter(max_requests=100, window=timedelta(minutes=15))
        state = limiter.hit("203.0.113.7")
        if not state.allowed:
            ...
    """

    def __init__(self, max_requests: int, window: timedelta):
        self.max_requests = max_requests
        self._item = RateLimitItemPerSecond(
            max_requests, max(1, int(window.total_seconds()))
        )
        self._limiter = FixedWindowRateLimiter(MemoryStorage())

    def hit(self, key: str) -> RateLimitState:
        """Count one request for ``key`` and report the window afterwards."""
        allowed = self._limiter.hit(self._item, key)
        reset_time, remaining = self._limiter.get_window_stats(self._item, key)
        return RateLimitState(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, remaining),
            reset_after=max(0, math.ceil(reset_time - time.time())),
        )
