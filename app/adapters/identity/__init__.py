"""Identity provider adapter layer - abstracts over the hosted user directory."""

from app.adapters.identity.base import (
    MAX_USER_LOOKUP,
    AbstractIdentityProvider,
    RawUser,
    to_author_projection,
)
from app.adapters.identity.clerk_client import ClerkIdentityProvider
from app.adapters.identity.factory import create_identity_provider
from app.adapters.identity.in_memory import InMemoryIdentityProvider

__all__ = [
    "MAX_USER_LOOKUP",
    "AbstractIdentityProvider",
    "ClerkIdentityProvider",
    "InMemoryIdentityProvider",
    "RawUser",
    "create_identity_provider",
    "to_author_projection",
]
