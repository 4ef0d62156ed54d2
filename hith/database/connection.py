"""
Database Connection Management.

This module handles the async SQLAlchemy engine for users and messages.
It provides:
- Engine creation from an async URL (asyncpg in production, aiosqlite locally)
- Session management with commit/rollback
- Health checks

Every call suspends instead of blocking, so one slow query only delays
the message it belongs to.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hith.core.config import get_settings, normalize_database_url
from hith.core.logging_config import get_logger

logger = get_logger(__name__)


class DatabaseConnection:
    """
    Manages the async engine and session lifecycle.

    Example:
        >>> db = DatabaseConnection("sqlite+aiosqlite:///./hith.db")
        >>> async with db.get_session() as session:
        ...     await session.execute(text("SELECT 1"))
    """

    def __init__(self, connection_url: Optional[str] = None):
        """
        Initialize the async engine.

        Args:
            connection_url: Optional connection URL. If not provided, uses settings.
        """
        db_url = normalize_database_url(connection_url or get_settings().database_url)

        engine_kwargs = {"echo": False}
        if not db_url.startswith("sqlite"):
            # pool_pre_ping: Test connections before using (handles stale connections)
            engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)

        self.url = db_url
        self.engine = create_async_engine(db_url, **engine_kwargs)

        self._session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(f"Database connection initialized: {db_url.split('@')[-1] if '@' in db_url else db_url}")

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get a database session with automatic cleanup.

        Transactions are rolled back on error, committed on success.

        Yields:
            SQLAlchemy AsyncSession object
        """
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error, rolling back: {e}")
            raise
        finally:
            await session.close()

    async def check_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection is healthy, False otherwise.
        """
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
            logger.debug("Database connection check: OK")
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    async def close(self) -> None:
        """Close all connections in the pool."""
        await self.engine.dispose()
        logger.info("Database connections closed")


# Module-level instance (singleton pattern)
_db_connection: Optional[DatabaseConnection] = None


def get_database() -> DatabaseConnection:
    """
    Get or create the database connection instance.

    This lazy initialization prevents connection before app startup.
    """
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection
