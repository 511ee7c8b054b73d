"""Post store interface.

Posts are create-and-read only; there is no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.post import Post


class AbstractPostStore(ABC):
    """Interface for post persistence."""

    @abstractmethod
    async def list_recent(self, *, limit: int, author_id: str | None = None) -> list[Post]:
        """Return up to ``limit`` posts, newest first.

        Args:
            limit: Maximum number of posts.
            author_id: Only return posts by this author when given.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, post_id: str) -> Post | None:
        raise NotImplementedError

    @abstractmethod
    async def create(self, *, author_id: str, content: str) -> Post:
        """Insert a post; the store assigns ``id`` and ``created_at``."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections, if any."""
