"""Public profile lookups."""

from __future__ import annotations

from app.adapters.identity.base import AbstractIdentityProvider
from app.core.errors import NotFoundAppError
from app.schemas.author import AuthorProjection


def normalize_username(raw: str) -> str:
    """Strip surrounding whitespace and a leading ``@`` (profile URLs look like ``/@name``).

    Examples:
        >>> normalize_username("@octocat")
        'octocat'
        >>> normalize_username(" octocat ")
        'octocat'
    """
    username = raw.strip()
    return username[1:] if username.startswith("@") else username


class ProfileService:
    def __init__(self, *, identity: AbstractIdentityProvider) -> None:
        self.identity = identity

    async def get_user_by_username(self, username: str) -> AuthorProjection:
        """Resolve a username to its public projection.

        Raises:
            NotFoundAppError: If the username is empty or unknown.
        """
        normalized = normalize_username(username)
        if not normalized:
            raise NotFoundAppError(
                code="user_not_found",
                message="User not found",
                details={"username": username},
            )
        return await self.identity.get_user_by_username(normalized)
