"""Process-wide adapter instances and FastAPI service providers.

Adapters wrap connection pools (HTTP, database, rate-limit store), so one
instance of each is built at startup (``init_adapters``) and shared by all
requests. Tests replace ``get_post_service`` / ``get_profile_service``
through ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging

from app.adapters.identity.base import AbstractIdentityProvider
from app.adapters.identity.factory import create_identity_provider
from app.adapters.posts.base import AbstractPostStore
from app.adapters.posts.factory import create_post_store
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.factory import create_rate_limiter
from app.core.config import settings
from app.services.post_service import PostService
from app.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

_post_store: AbstractPostStore | None = None
_identity_provider: AbstractIdentityProvider | None = None
_rate_limiter: AbstractRateLimiter | None = None


def get_post_store() -> AbstractPostStore:
    global _post_store
    if _post_store is None:
        _post_store = create_post_store()
    return _post_store


def get_identity_provider() -> AbstractIdentityProvider:
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = create_identity_provider()
    return _identity_provider


def get_rate_limiter() -> AbstractRateLimiter | None:
    """Return the shared limiter, or None when rate limiting is disabled."""
    global _rate_limiter
    if not settings.app.rate_limit_enabled:
        return None
    if _rate_limiter is None:
        _rate_limiter = create_rate_limiter()
    return _rate_limiter


def init_adapters() -> None:
    """Build every configured adapter now so configuration errors stop startup.

    Raises:
        ConfigurationAppError: If an adapter is misconfigured.
    """
    get_post_store()
    get_identity_provider()
    get_rate_limiter()
    logger.info("adapters.ready")


def get_post_service() -> PostService:
    return PostService(
        store=get_post_store(),
        identity=get_identity_provider(),
        rate_limiter=get_rate_limiter(),
        feed_limit=settings.app.feed_limit,
    )


def get_profile_service() -> ProfileService:
    return ProfileService(identity=get_identity_provider())


async def close_adapters() -> None:
    """Close every adapter created so far and forget it."""
    global _post_store, _identity_provider, _rate_limiter

    for adapter in (_post_store, _identity_provider, _rate_limiter):
        if adapter is not None:
            await adapter.close()

    _post_store = None
    _identity_provider = None
    _rate_limiter = None
    logger.info("adapters.closed")
