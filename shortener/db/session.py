"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: adapter chosen from the DATABASE_URL dialect
- Connection pooling: configured per database type
- Explicit lifecycle: a Database is built at startup, passed to whoever
  needs it and disposed at shutdown; there is no module-level engine
- Error handling: automatic rollback on exceptions
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from shortener.core.setting import Settings
from shortener.db.interface import DatabaseAdapter
from shortener.db.postgres_adapter import PostgreSQLAdapter
from shortener.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def get_database_adapter(settings: Settings) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for the configured URL.

    Raises:
        ValueError: If the dialect has no adapter
    """
    backend = make_url(settings.DATABASE_URL).get_backend_name()
    if backend == "sqlite":
        return SQLiteAdapter()
    if backend == "postgresql":
        return PostgreSQLAdapter(use_ssl=bool(settings.DATABASE_SSL))
    raise ValueError(f"Unsupported database backend: {backend}")


class Database:
    """
    Owns the async engine and session factory for one application instance.

    The engine's pool is safe for concurrent use by simultaneous requests;
    each unit of work checks out its own session via session().
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Objects stay readable after commit
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        adapter = get_database_adapter(settings)
        engine = adapter.create_engine(settings.DATABASE_URL)
        logger.info(f"Database engine created (dialect={adapter.get_dialect_name()})")
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session for one unit of work.

        Commits on success, rolls back on any exception and always
        returns the connection to the pool.
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create missing tables (idempotent)."""
        # Registers the tables on SQLModel.metadata
        from shortener.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def ping(self) -> bool:
        """Return True if a trivial query succeeds."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
