"""List-backed post store for tests and local development.

Per-process and not shared between workers.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable

from app.adapters.posts.base import AbstractPostStore
from app.schemas.post import Post


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryPostStore(AbstractPostStore):
    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._posts: list[Post] = []

    def __len__(self) -> int:
        return len(self._posts)

    async def list_recent(self, *, limit: int, author_id: str | None = None) -> list[Post]:
        with self._lock:
            # Newest insert first among equal timestamps
            ordered = sorted(
                reversed(self._posts), key=lambda post: post.created_at, reverse=True
            )
        if author_id is not None:
            ordered = [post for post in ordered if post.author_id == author_id]
        return ordered[:limit]

    async def get_by_id(self, post_id: str) -> Post | None:
        with self._lock:
            return next((post for post in self._posts if post.id == post_id), None)

    async def create(self, *, author_id: str, content: str) -> Post:
        post = Post(
            id=str(uuid.uuid4()),
            author_id=author_id,
            content=content,
            created_at=self._clock(),
        )
        with self._lock:
            self._posts.append(post)
        return post
