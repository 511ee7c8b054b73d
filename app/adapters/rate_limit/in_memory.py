"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter that keeps a timestamp log per key.

    An event counts against the budget while ``now - timestamp < window``,
    so the window trails the current time instead of snapping to calendar
    buckets (e.g. at most 3 posts in any 60 second span).

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits. Use ``LimitsRateLimiter`` with a shared store
        in that case.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        prefix: str = "ratelimit",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of events per window.
            window_seconds: Length of the sliding window in seconds.
            prefix: Namespace for keys.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        super().__init__(limit=limit, window_seconds=window_seconds, prefix=prefix)
        self._clock = clock
        self._lock = threading.RLock()
        self._events_by_key: dict[str, deque[float]] = {}

    def _prune(self, events: deque[float], now: float) -> None:
        cutoff = now - self._window_seconds
        while events and events[0] <= cutoff:
            events.popleft()

    async def limit(self, identifier: str) -> RateLimitDecision:
        """Record an event for ``identifier`` when fewer than ``limit`` fall in the window.

        Raises:
            ValueError: If identifier is empty.
        """
        key = self.build_key(identifier)
        now = self._clock()

        with self._lock:
            events = self._events_by_key.setdefault(key, deque())
            self._prune(events, now)

            if len(events) < self._limit:
                events.append(now)
                reset_at = events[0] + self._window_seconds
                return RateLimitDecision(
                    success=True,
                    limit=self._limit,
                    remaining=self._limit - len(events),
                    reset_at=int(math.ceil(reset_at)),
                )

            reset_at = events[0] + self._window_seconds
            return RateLimitDecision(
                success=False,
                limit=self._limit,
                remaining=0,
                reset_at=int(math.ceil(reset_at)),
                retry_after_seconds=max(0, int(math.ceil(reset_at - now))),
            )

    def reset(self) -> None:
        """Forget every recorded event."""
        with self._lock:
            self._events_by_key.clear()
