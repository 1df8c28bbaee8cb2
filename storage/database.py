"""
Storage - Database.

============================================================
RESPONSIBILITY
============================================================
Manages the async database engine and sessions backing the
durable sentiment cache.

- Creates the engine from SENTIMENT_DATABASE_URL (.env aware)
- Creates tables on connect
- Provides session and transaction context managers
- Wraps driver failures in DatabasePersistenceError

============================================================
DESIGN PRINCIPLES
============================================================
- Async by default (SQLAlchemy asyncio + aiosqlite/asyncpg)
- Explicit commit/rollback boundaries
- Hard failures on persistence errors; callers decide policy

============================================================
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .models.base import Base


load_dotenv()

logger = logging.getLogger(__name__)


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///sentiment_cache.db"


# =============================================================
# EXCEPTIONS
# =============================================================


class DatabasePersistenceError(Exception):
    """Raised when database persistence fails."""
    pass


class DatabaseConnectionError(DatabasePersistenceError):
    """Raised when database connection fails."""
    pass


class DatabaseInitializationError(DatabasePersistenceError):
    """Raised when table creation fails."""
    pass


# =============================================================
# DATABASE
# =============================================================


def get_database_url() -> str:
    """Get database URL from environment."""
    url = os.getenv("SENTIMENT_DATABASE_URL")
    if not url:
        url = DEFAULT_DATABASE_URL
        logger.debug(f"SENTIMENT_DATABASE_URL not set, using default: {url}")
    return url


class Database:
    """
    Owns one async engine and its session factory.

    Usage:
        db = Database("sqlite+aiosqlite:///cache.db")
        await db.connect()
        async with db.transaction_scope() as session:
            session.add(record)
        await db.disconnect()
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False) -> None:
        self.url = url or get_database_url()
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def get_engine(self) -> AsyncEngine:
        """Get the engine, creating it if necessary."""
        if self._engine is None:
            kwargs = {"echo": self.echo}
            if ":memory:" in self.url:
                # Every connection must see the same in-memory database
                kwargs["poolclass"] = StaticPool
                kwargs["connect_args"] = {"check_same_thread": False}
            self._engine = create_async_engine(self.url, **kwargs)
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info(f"Created database engine for: {self.url.split('@')[-1]}")
        return self._engine

    async def connect(self) -> None:
        """Create the engine and any missing tables."""
        engine = self.get_engine()
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise DatabaseInitializationError(f"Table creation failed: {e}") from e
        logger.info("Database tables verified")

    async def disconnect(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    async def health_check(self) -> bool:
        """Run a trivial query; raise DatabaseConnectionError on failure."""
        engine = self.get_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            raise DatabaseConnectionError(f"Cannot connect to database: {e}") from e

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session with automatic rollback on error.

        Caller is responsible for committing.
        """
        self.get_engine()
        session = self._session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Explicit transaction boundary.

        Commits only if no exception occurs, rolls back on any exception.
        """
        self.get_engine()
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database transaction failed, rolling back: {e}")
            await session.rollback()
            raise DatabasePersistenceError(f"Transaction failed: {e}") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
