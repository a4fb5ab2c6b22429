# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the records store.

This package provides SQLAlchemy async database connections for the
records database: the user directory plus the three record streams
(batch memberships, fee ledger, test scores).

Example:
    from src.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(StudentBatch))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    build_sessionmaker,
    check_database_connection,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
    unit_of_work,
)

__all__ = [
    "DatabaseError",
    "build_engine",
    "build_sessionmaker",
    "check_database_connection",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
    "unit_of_work",
]
