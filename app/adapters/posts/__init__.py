"""Post store adapters."""

from app.adapters.posts.base import AbstractPostStore
from app.adapters.posts.factory import create_post_store
from app.adapters.posts.in_memory import InMemoryPostStore
from app.adapters.posts.sqlalchemy_store import SQLAlchemyPostStore

__all__ = [
    "AbstractPostStore",
    "InMemoryPostStore",
    "SQLAlchemyPostStore",
    "create_post_store",
]
