"""Factory pattern for creating identity provider instances."""

from app.adapters.identity.base import AbstractIdentityProvider
from app.adapters.identity.clerk_client import ClerkIdentityProvider
from app.adapters.identity.in_memory import InMemoryIdentityProvider
from app.core.config import settings
from app.core.errors import ConfigurationAppError


def create_identity_provider() -> AbstractIdentityProvider:
    """Instantiate the identity provider selected by ``IDENTITY_PROVIDER``.

    Returns:
        AbstractIdentityProvider: Configured provider instance.

    Raises:
        ConfigurationAppError: If provider-specific requirements are not met.
    """
    provider = settings.identity.provider.lower()

    if provider == "clerk":
        if not settings.identity.secret_key:
            raise ConfigurationAppError(
                code="identity_missing_secret_key",
                message="Clerk provider requires IDENTITY_SECRET_KEY environment variable",
            )
        return ClerkIdentityProvider(
            secret_key=settings.identity.secret_key,
            base_url=settings.identity.api_base_url,
            timeout_seconds=settings.identity.timeout_seconds,
        )

    if provider == "memory":
        return InMemoryIdentityProvider()

    raise ConfigurationAppError(
        code="identity_unknown_provider",
        message=(
            f"Unknown identity provider: '{provider}'. Supported providers: clerk, memory"
        ),
    )
