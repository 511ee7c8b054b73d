"""Async database session manager.

Invariants:
    - One async engine per process
    - Every session rolls back on exception; SQLAlchemy errors surface as
      PersistenceAppError
    - expire_on_commit=False so returned rows stay readable after commit
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.errors import PersistenceAppError
from app.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the engine and hands out sessions with auto-rollback."""

    def __init__(self, database_url: str, *, pool_size: int = 5, max_overflow: int = 10) -> None:
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600)

        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a session; roll back and map errors on failure."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as exc:
            await session.rollback()
            logger.error("db.integrity_error", extra={"error_msg": str(exc.orig)})
            raise PersistenceAppError(
                code="persistence_integrity_error",
                message="Integrity constraint violated",
            ) from exc
        except OperationalError as exc:
            await session.rollback()
            logger.error("db.operational_error", extra={"error_msg": str(exc.orig)})
            raise PersistenceAppError(
                code="persistence_unavailable",
                message="Post store is unavailable",
            ) from exc
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("db.error", extra={"error_type": type(exc).__name__})
            raise PersistenceAppError(
                code="persistence_error",
                message="Post store operation failed",
            ) from exc
        finally:
            await session.close()

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except PersistenceAppError:
            return False

    async def close(self) -> None:
        await self.engine.dispose()
