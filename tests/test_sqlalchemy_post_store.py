"""Tests for the SQLAlchemy post store against a throwaway SQLite file."""

from datetime import datetime, timedelta

import pytest

from app.adapters.posts.sqlalchemy_store import SQLAlchemyPostStore
from app.db.session import DatabaseSessionManager
from app.models.post import PostRecord


@pytest.fixture
async def db_store(tmp_path):
    db = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}")
    store = SQLAlchemyPostStore(db)
    await store.create_tables()
    yield store
    await store.close()


@pytest.fixture
async def seeded(db_store: SQLAlchemyPostStore):
    """Three posts one minute apart, inserted out of order."""
    start = datetime(2024, 1, 1, 12, 0, 0)
    rows = [
        PostRecord(id="p2", author_id="user_bob", content="🔥", created_at=start + timedelta(minutes=1)),
        PostRecord(id="p1", author_id="user_alice", content="🎉", created_at=start),
        PostRecord(id="p3", author_id="user_alice", content="🚀", created_at=start + timedelta(minutes=2)),
    ]
    async with db_store._db.session() as session:
        session.add_all(rows)
        await session.commit()
    return db_store


@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamp(db_store: SQLAlchemyPostStore) -> None:
    post = await db_store.create(author_id="user_alice", content="👋")

    assert post.id
    assert post.author_id == "user_alice"
    assert post.content == "👋"
    assert post.created_at is not None
    assert await db_store.get_by_id(post.id) == post


@pytest.mark.asyncio
async def test_list_recent_is_newest_first(seeded: SQLAlchemyPostStore) -> None:
    posts = await seeded.list_recent(limit=100)

    assert [p.id for p in posts] == ["p3", "p2", "p1"]


@pytest.mark.asyncio
async def test_list_recent_respects_limit(seeded: SQLAlchemyPostStore) -> None:
    posts = await seeded.list_recent(limit=2)

    assert [p.id for p in posts] == ["p3", "p2"]


@pytest.mark.asyncio
async def test_list_recent_filters_by_author(seeded: SQLAlchemyPostStore) -> None:
    posts = await seeded.list_recent(limit=100, author_id="user_alice")

    assert [p.id for p in posts] == ["p3", "p1"]
    assert await seeded.list_recent(limit=100, author_id="user_nobody") == []


@pytest.mark.asyncio
async def test_get_by_id_missing(seeded: SQLAlchemyPostStore) -> None:
    assert await seeded.get_by_id("nope") is None


@pytest.mark.asyncio
async def test_health_check(db_store: SQLAlchemyPostStore) -> None:
    assert await db_store.health_check() is True
