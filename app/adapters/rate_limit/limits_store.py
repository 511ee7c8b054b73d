"""Rate limiter backed by an external window store through ``limits``.

``limits`` is the storage layer behind slowapi. Its moving-window strategy
keeps a per-key event log in the store and performs check-and-record as one
atomic operation there, so several API workers share a single budget per
author when the store is Redis (``async+redis://host:6379``).
"""

from __future__ import annotations

import math
import time

from limits import RateLimitItemPerSecond
from limits.aio.strategies import MovingWindowRateLimiter
from limits.storage import storage_from_string

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision


class LimitsRateLimiter(AbstractRateLimiter):
    """Sliding-window limiter whose state lives in a ``limits`` async storage."""

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        storage_uri: str = "async+memory://",
        prefix: str = "ratelimit",
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of events per window.
            window_seconds: Length of the sliding window in seconds.
            storage_uri: ``limits`` async storage URI.
            prefix: Namespace for keys.

        Raises:
            ValueError: If limit or window_seconds are invalid, or the URI is
                not an async storage.
        """
        super().__init__(limit=limit, window_seconds=window_seconds, prefix=prefix)
        if not storage_uri.startswith("async+"):
            raise ValueError("storage_uri must use an async+ scheme (e.g. async+redis://)")

        self._storage = storage_from_string(storage_uri)
        self._strategy = MovingWindowRateLimiter(self._storage)
        self._item = RateLimitItemPerSecond(limit, window_seconds)

    async def limit(self, identifier: str) -> RateLimitDecision:
        key = self.build_key(identifier)

        success = await self._strategy.hit(self._item, key)
        stats = await self._strategy.get_window_stats(self._item, key)

        reset_at = int(math.ceil(stats.reset_time))
        if success:
            return RateLimitDecision(
                success=True,
                limit=self._limit,
                remaining=max(0, stats.remaining),
                reset_at=reset_at,
            )

        return RateLimitDecision(
            success=False,
            limit=self._limit,
            remaining=0,
            reset_at=reset_at,
            retry_after_seconds=max(1, int(math.ceil(stats.reset_time - time.time()))),
        )

    async def reset(self) -> None:
        """Clear all counters in the backing store."""
        await self._storage.reset()

    async def close(self) -> None:
        """Nothing to release here.

        ``limits`` storages own their connection pools and expose no close
        hook; the Redis client's pool is dropped with the process.
        """
