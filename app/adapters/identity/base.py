"""Identity provider interface and the client-safe user projection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from app.core.errors import NotFoundAppError
from app.schemas.author import AuthorProjection

# The provider's user listing endpoint returns at most 100 users per call.
MAX_USER_LOOKUP = 100

RawUser = Mapping[str, Any]


def to_author_projection(user: RawUser) -> AuthorProjection:
    """Reduce a raw provider user to ``{id, username, profile_image_url}``.

    Every other field (email addresses, metadata, timestamps, ...) is dropped
    here so it cannot reach a response body.
    """
    return AuthorProjection(
        id=str(user["id"]),
        username=user.get("username"),
        profile_image_url=user.get("image_url") or user.get("profile_image_url"),
    )


class AbstractIdentityProvider(ABC):
    """Interface for user directory lookups."""

    @abstractmethod
    async def get_user_list(
        self,
        *,
        user_ids: Sequence[str] | None = None,
        usernames: Sequence[str] | None = None,
        limit: int = MAX_USER_LOOKUP,
    ) -> list[RawUser]:
        """Fetch users matching any of the given ids or usernames in one call.

        Args:
            user_ids: Provider user ids to match.
            usernames: Usernames to match.
            limit: Maximum number of users to return (1..100).

        Returns:
            list[RawUser]: Raw user records as returned by the provider.

        Raises:
            IdentityProviderAppError: If the provider call fails.
        """
        ...

    async def close(self) -> None:
        """Release network resources, if any."""

    async def list_authors(
        self,
        *,
        user_ids: Sequence[str] | None = None,
        usernames: Sequence[str] | None = None,
        limit: int = MAX_USER_LOOKUP,
    ) -> list[AuthorProjection]:
        """Batched lookup returning only client-safe projections."""
        _check_lookup_size(user_ids, usernames, limit)
        users = await self.get_user_list(user_ids=user_ids, usernames=usernames, limit=limit)
        return [to_author_projection(user) for user in users]

    async def get_user_by_username(self, username: str) -> AuthorProjection:
        """Resolve a single username.

        Raises:
            NotFoundAppError: If no user has this username.
        """
        authors = await self.list_authors(usernames=[username], limit=1)
        if not authors:
            raise NotFoundAppError(
                code="user_not_found",
                message="User not found",
                details={"username": username},
            )
        return authors[0]


def _check_lookup_size(
    user_ids: Sequence[str] | None,
    usernames: Sequence[str] | None,
    limit: int,
) -> None:
    if not 1 <= limit <= MAX_USER_LOOKUP:
        raise ValueError(f"limit must be between 1 and {MAX_USER_LOOKUP}")
    if len(user_ids or ()) > MAX_USER_LOOKUP or len(usernames or ()) > MAX_USER_LOOKUP:
        raise ValueError(f"at most {MAX_USER_LOOKUP} users can be looked up per call")
