# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory gateway capability.

The record domains never query the users table themselves. They receive
a DirectoryGateway and ask it who exists and who is active, so they can
be exercised against an in-memory directory in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import User

ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Identity and activity status of a directory entry."""

    user_id: int
    name: str
    email: str
    phone_number: str | None
    role_id: int
    status: str

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE

    @classmethod
    def from_model(cls, user: User) -> UserRecord:
        return cls(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            phone_number=user.phone_number,
            role_id=user.role_id,
            status=user.status,
        )


@runtime_checkable
class DirectoryGateway(Protocol):
    """Read-only view of the user directory."""

    async def find_user(self, user_id: int) -> UserRecord | None:
        """Return the user regardless of status, or None."""
        ...

    async def find_active_user(self, user_id: int) -> UserRecord | None:
        """Return the user only if active, or None."""
        ...

    async def find_active_users(self, user_ids: Iterable[int]) -> dict[int, UserRecord]:
        """Return the active users among user_ids, keyed by id."""
        ...


class SqlDirectoryGateway:
    """DirectoryGateway backed by the users table.

    Shares the caller's session so lookups run inside the same
    transaction as the write they guard.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_user(self, user_id: int) -> UserRecord | None:
        result = await self.db.execute(select(User).where(User.user_id == user_id))
        user = result.scalar_one_or_none()
        return UserRecord.from_model(user) if user else None

    async def find_active_user(self, user_id: int) -> UserRecord | None:
        result = await self.db.execute(
            select(User).where(User.user_id == user_id, User.status == ACTIVE)
        )
        user = result.scalar_one_or_none()
        return UserRecord.from_model(user) if user else None

    async def find_active_users(self, user_ids: Iterable[int]) -> dict[int, UserRecord]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(User).where(User.user_id.in_(ids), User.status == ACTIVE)
        )
        return {user.user_id: UserRecord.from_model(user) for user in result.scalars().all()}
