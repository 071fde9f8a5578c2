"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

The engine and session factory live on a Database handle created once at
startup (lifespan) and stored on app.state; nothing here is module-global.
Tables are created with metadata.create_all when database_auto_create is on.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from entitystore.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _engine_kwargs(settings: Settings) -> dict[str, Any]:
    """Pool options; SQLite (tests, local runs) uses its own pool and takes none."""
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if settings.database_url.startswith("sqlite"):
        return kwargs
    kwargs.update(
        pool_pre_ping=True,
        pool_size=settings.db_pool_size if settings.db_pool_size is not None else 20,
        max_overflow=(
            settings.db_max_overflow if settings.db_max_overflow is not None else 30
        ),
        pool_recycle=3600,
    )
    return kwargs


class Database:
    """Owns the engine (connection pool) and hands out sessions."""

    def __init__(self, settings: Settings, engine: AsyncEngine | None = None) -> None:
        self.engine = engine or create_async_engine(
            settings.database_url, **_engine_kwargs(settings)
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_all(self) -> None:
        """Create missing tables. Connection errors propagate (startup is fatal)."""
        # Import models so they register on Base.metadata.
        from entitystore.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def ping(self) -> bool:
        """Return True if the database answers SELECT 1."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Database ping failed", exc_info=True)
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; repositories commit their own writes."""
        async with self.session_factory() as session:
            yield session
