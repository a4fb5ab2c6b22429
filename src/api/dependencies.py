# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Initialize and close the records database
- Get a request-scoped database session
- Get the record service facade bound to that session

Example:
    @router.get("/summary")
    async def fee_summary(records: RecordServiceDep) -> FeeSummaryResponse:
        return await records.fee_summary()
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domains.records import RecordService
from src.infrastructure.database.connection import (
    close_database,
    create_schema,
    get_session,
    init_database,
)
from src.infrastructure.database.migrations.runner import run_migrations

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the records database connection pool.

    With DATABASE_AUTO_MIGRATE enabled, pending migrations are applied
    first. Otherwise local SQLite databases get their tables created
    directly and server databases are left to a migration job.
    """
    settings = get_settings()

    if settings.database.auto_migrate:
        applied = await run_migrations(settings.database.url)
        logger.info("Applied %d records migrations on startup", len(applied))

    await init_database(settings)

    if settings.database.is_sqlite and not settings.database.auto_migrate:
        await create_schema()
        logger.info("Created records schema on SQLite database")


async def close_db() -> None:
    """Close the records database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get records database session.

    Yields:
        AsyncSession scoped to the request.
    """
    async with get_session() as session:
        yield session


def get_record_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RecordService:
    """Get the record service facade for this request."""
    return RecordService.from_settings(db, settings)


RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]
