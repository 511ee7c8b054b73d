"""Dict-backed identity provider for tests and local development."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from app.adapters.identity.base import MAX_USER_LOOKUP, AbstractIdentityProvider, RawUser


class InMemoryIdentityProvider(AbstractIdentityProvider):
    """Keeps raw user records in insertion order.

    Records may carry any provider field; projections strip them like the
    real adapter does. ``calls`` records each lookup for assertions.
    """

    def __init__(self, users: Iterable[RawUser] = ()) -> None:
        self._users: dict[str, dict[str, Any]] = {}
        self.calls: list[dict[str, Any]] = []
        for user in users:
            self.add_user(user)

    def add_user(self, user: RawUser) -> None:
        self._users[str(user["id"])] = dict(user)

    def remove_user(self, user_id: str) -> None:
        self._users.pop(user_id, None)

    async def get_user_list(
        self,
        *,
        user_ids: Sequence[str] | None = None,
        usernames: Sequence[str] | None = None,
        limit: int = MAX_USER_LOOKUP,
    ) -> list[RawUser]:
        self.calls.append(
            {"user_ids": list(user_ids or []), "usernames": list(usernames or []), "limit": limit}
        )
        wanted_ids = set(user_ids or ())
        wanted_names = set(usernames or ())

        matches = [
            user
            for user in self._users.values()
            if user["id"] in wanted_ids or user.get("username") in wanted_names
        ]
        return matches[:limit]
