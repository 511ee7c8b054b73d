"""Rate limiter interfaces.

The post service depends on this abstraction (not the concrete implementation)
so the window store can be swapped (in-process, Redis, ...) without touching
business logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single ``limit`` call.

    Attributes:
        success: Whether the caller may proceed.
        limit: Max events per window.
        remaining: Events left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the oldest counted event leaves the window.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    success: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for sliding-window rate limiters keyed by an identifier."""

    def __init__(self, *, limit: int, window_seconds: int, prefix: str = "ratelimit") -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._prefix = prefix

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def build_key(self, identifier: str) -> str:
        """Namespace an identifier, e.g. ``ratelimit:user_123``."""
        if not identifier:
            raise ValueError("identifier must be a non-empty string")
        return f"{self._prefix}:{identifier}"

    @abstractmethod
    async def limit(self, identifier: str) -> RateLimitDecision:
        """Record one event for ``identifier`` if the window has room.

        Args:
            identifier: Unique identifier of the caller (e.g. author id).

        Returns:
            RateLimitDecision describing whether the event was accepted.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release store connections, if any."""
