# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Records database connection management using SQLAlchemy async.

This module owns the engine and sessionmaker for the records database
(user directory, batch memberships, fee ledger, test scores).

Uses SQLAlchemy 2.0 async API with the asyncpg driver in production and
aiosqlite for local development and tests.

Example:
    from src.infrastructure.database.connection import (
        init_database,
        get_session,
    )

    # Initialize at application startup
    await init_database(settings)

    # Use in request handlers
    async with get_session() as session:
        result = await session.execute(select(FeeStatus))
        rows = result.scalars().all()
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.infrastructure.database.models.base import Base

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Module-level state for the records database connection
_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


def build_engine(url: str, *, echo: bool = False, pool_size: int = 10, max_overflow: int = 20) -> AsyncEngine:
    """Create an async engine with pool options suited to the backend.

    SQLite does not accept pool sizing arguments; in-memory SQLite also
    needs a single shared connection or every checkout sees an empty
    database.

    Args:
        url: Async database URL.
        echo: Log emitted SQL.
        pool_size: Connection pool size (server backends only).
        max_overflow: Maximum overflow connections (server backends only).

    Returns:
        Configured AsyncEngine.
    """
    kwargs: dict[str, Any] = {"echo": echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.endswith("://"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
        )

    return create_async_engine(url, **kwargs)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the sessionmaker used for request-scoped sessions."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(settings: "Settings") -> None:
    """Initialize the records database connection pool.

    This should be called once at application startup.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _engine, _sessionmaker

    try:
        _engine = build_engine(
            settings.database.url,
            echo=settings.debug and settings.is_development,
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.max_overflow,
        )
        _sessionmaker = build_sessionmaker(_engine)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize records database connection", e) from e


async def close_database() -> None:
    """Close the records database connection pool.

    This should be called at application shutdown.
    """
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_engine() -> AsyncEngine:
    """Get the records database async engine.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _engine is None:
        raise DatabaseError(
            "Records database not initialized. Call init_database() first."
        )
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the records database sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _sessionmaker is None:
        raise DatabaseError(
            "Records database not initialized. Call init_database() first."
        )
    return _sessionmaker


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Get an async session for the records database.

    Services commit their own units of work; anything left pending when
    the block exits cleanly is committed, and any exception rolls the
    session back.

    Yields:
        AsyncSession for database operations.

    Raises:
        DatabaseError: If the database has not been initialized or
            if a database operation fails.
    """
    sessionmaker = get_sessionmaker()

    async with sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block of reads and writes as one commit-or-nothing unit.

    Commits when the block exits cleanly. Any exception, including
    cancellation from an expired deadline, rolls the session back before
    propagating, so no partial write is ever committed.

    Args:
        session: Session the block operates on.

    Yields:
        The same session.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """Create all tables directly from the models.

    Intended for local development and tests; deployed databases are
    managed through the migration runner.

    Args:
        engine: Engine to use. Defaults to the initialized engine.
    """
    target = engine or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database_connection() -> bool:
    """Check if the records database is reachable.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _engine is None:
        return False

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
