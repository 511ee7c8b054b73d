"""Factory for the configured post store."""

import logging

from app.adapters.posts.base import AbstractPostStore
from app.adapters.posts.in_memory import InMemoryPostStore
from app.adapters.posts.sqlalchemy_store import SQLAlchemyPostStore
from app.core.config import settings
from app.db.session import DatabaseSessionManager

logger = logging.getLogger(__name__)


def create_post_store() -> AbstractPostStore:
    """Return a SQLAlchemy store when ``DATABASE_URL`` is set, else an in-memory one."""
    if not settings.database.url:
        logger.warning(
            "post_store.in_memory",
            extra={"reason": "database_url_not_configured"},
        )
        return InMemoryPostStore()

    db = DatabaseSessionManager(
        settings.database.url,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )
    return SQLAlchemyPostStore(db)
