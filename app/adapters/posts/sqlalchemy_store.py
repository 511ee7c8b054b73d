"""SQLAlchemy-backed post store."""

from __future__ import annotations

from sqlalchemy import select

from app.adapters.posts.base import AbstractPostStore
from app.db.session import DatabaseSessionManager
from app.models.post import PostRecord
from app.schemas.post import Post


class SQLAlchemyPostStore(AbstractPostStore):
    """Reads and writes the ``posts`` table through an async session manager."""

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db

    async def list_recent(self, *, limit: int, author_id: str | None = None) -> list[Post]:
        stmt = select(PostRecord).order_by(PostRecord.created_at.desc()).limit(limit)
        if author_id is not None:
            stmt = stmt.where(PostRecord.author_id == author_id)

        async with self._db.session() as session:
            rows = (await session.scalars(stmt)).all()
        return [Post.model_validate(row) for row in rows]

    async def get_by_id(self, post_id: str) -> Post | None:
        async with self._db.session() as session:
            row = await session.get(PostRecord, post_id)
        return Post.model_validate(row) if row is not None else None

    async def create(self, *, author_id: str, content: str) -> Post:
        async with self._db.session() as session:
            row = PostRecord(author_id=author_id, content=content)
            session.add(row)
            await session.commit()
            await session.refresh(row)
        return Post.model_validate(row)

    async def close(self) -> None:
        await self._db.close()

    async def create_tables(self) -> None:
        await self._db.create_tables()

    async def health_check(self) -> bool:
        return await self._db.health_check()
