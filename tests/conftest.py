# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mocked sessions, in-memory directory)
- Integration tests (in-memory SQLite records database)
"""

from collections.abc import AsyncGenerator, Iterable
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.domains.directory.gateway import UserRecord
from src.infrastructure.database.connection import (
    build_engine,
    build_sessionmaker,
    create_schema,
)
from src.infrastructure.database.models import User

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (in-memory database)"
    )


# =============================================================================
# Directory Fixtures
# =============================================================================


class FakeDirectory:
    """In-memory DirectoryGateway."""

    def __init__(self, users: Iterable[UserRecord] = ()) -> None:
        self.users = {user.user_id: user for user in users}

    def add(self, user_id: int, status: str = "active", name: str | None = None) -> UserRecord:
        user = UserRecord(
            user_id=user_id,
            name=name or f"Student {user_id}",
            email=f"student{user_id}@school.example",
            phone_number=None,
            role_id=3,
            status=status,
        )
        self.users[user_id] = user
        return user

    async def find_user(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)

    async def find_active_user(self, user_id: int) -> UserRecord | None:
        user = self.users.get(user_id)
        return user if user is not None and user.is_active else None

    async def find_active_users(self, user_ids: Iterable[int]) -> dict[int, UserRecord]:
        return {
            user_id: self.users[user_id]
            for user_id in set(user_ids)
            if user_id in self.users and self.users[user_id].is_active
        }


@pytest.fixture
def directory() -> FakeDirectory:
    """Provide an empty in-memory directory."""
    return FakeDirectory()


# =============================================================================
# Mock Session Fixtures
# =============================================================================


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory records database with the full schema."""
    engine = build_engine(TEST_DATABASE_URL)
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for records database tests."""
    sessionmaker = build_sessionmaker(db_engine)

    async with sessionmaker() as session:
        yield session


@pytest_asyncio.fixture
async def seed_users(db_session: AsyncSession):
    """Return a helper that inserts directory users.

    Usage:
        await seed_users((1, "active"), (2, "inactive"))
    """

    async def _seed(*users: tuple[int, str]) -> list[User]:
        rows = [
            User(
                user_id=user_id,
                name=f"Student {user_id}",
                email=f"student{user_id}@school.example",
                phone_number=f"555{user_id:04d}",
                role_id=3,
                status=status,
            )
            for user_id, status in users
        ]
        db_session.add_all(rows)
        await db_session.commit()
        return rows

    return _seed
