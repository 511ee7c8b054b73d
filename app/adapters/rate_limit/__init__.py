"""Rate limiting adapters.

The post service depends on ``AbstractRateLimiter`` only. Window state lives
either in this process (``InMemorySlidingWindowRateLimiter``) or in an
external store reached through the ``limits`` library (``LimitsRateLimiter``).
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from app.adapters.rate_limit.factory import create_rate_limiter
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from app.adapters.rate_limit.limits_store import LimitsRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemorySlidingWindowRateLimiter",
    "LimitsRateLimiter",
    "RateLimitDecision",
    "create_rate_limiter",
]
