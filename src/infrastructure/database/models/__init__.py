# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the records database."""

from src.infrastructure.database.models.base import Base, CreatedAtMixin, TimestampMixin
from src.infrastructure.database.models.directory import USER_STATUSES, User
from src.infrastructure.database.models.records import (
    FeeStatus,
    StudentBatch,
    StudentTestRecord,
)

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "USER_STATUSES",
    "User",
    "StudentBatch",
    "FeeStatus",
    "StudentTestRecord",
]
