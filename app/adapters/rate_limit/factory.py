"""Factory for the configured rate limiter."""

from limits.errors import ConfigurationError as LimitsConfigurationError

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from app.adapters.rate_limit.limits_store import LimitsRateLimiter
from app.core.config import settings
from app.core.errors import ConfigurationAppError


def create_rate_limiter() -> AbstractRateLimiter:
    """Instantiate the rate limiter selected by ``APP_RATE_LIMIT_BACKEND``.

    Returns:
        AbstractRateLimiter: Configured limiter instance.

    Raises:
        ConfigurationAppError: If the backend name or storage URI is invalid.
    """
    backend = settings.app.rate_limit_backend.lower()

    if backend == "memory":
        return InMemorySlidingWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
            prefix=settings.app.rate_limit_key_prefix,
        )

    if backend == "storage":
        try:
            return LimitsRateLimiter(
                limit=settings.app.rate_limit_requests,
                window_seconds=settings.app.rate_limit_window_seconds,
                storage_uri=settings.app.rate_limit_storage_uri,
                prefix=settings.app.rate_limit_key_prefix,
            )
        except (ValueError, LimitsConfigurationError) as exc:
            raise ConfigurationAppError(
                code="rate_limit_invalid_storage_uri",
                message="Invalid rate limit storage URI (expected e.g. async+redis://host:6379)",
            ) from exc

    raise ConfigurationAppError(
        code="rate_limit_unknown_backend",
        message=(
            f"Unknown rate limit backend: '{backend}'. Supported backends: memory, storage"
        ),
    )
