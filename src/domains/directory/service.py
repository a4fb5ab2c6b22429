# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User directory service.

Plain read/write entry points over the users table. Registration,
authentication and profile management live outside the record engine;
this service covers what the record engine needs to seed and maintain
directory entries.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.errors import DuplicateUserError, UserNotFoundError, ValidationError
from src.infrastructure.database.connection import unit_of_work
from src.infrastructure.database.models import User
from src.models.user import (
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)


class UserDirectoryService:
    """Service for maintaining directory entries.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def register_user(self, request: UserCreateRequest) -> UserResponse:
        """Add a user to the directory.

        Raises:
            DuplicateUserError: If the email or phone number is taken.
        """
        async with unit_of_work(self.db):
            await self._ensure_unique(request.email, request.phone_number)

            user = User(
                name=request.name,
                email=request.email,
                phone_number=request.phone_number,
                role_id=request.role_id,
                status=request.status,
            )
            self.db.add(user)

        await self.db.refresh(user)

        logger.info("Registered user %s (%s)", user.user_id, user.status)

        return UserResponse.model_validate(user)

    async def get_user(self, user_id: int) -> UserResponse:
        """Get a directory entry.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self._get_by_id(user_id)
        return UserResponse.model_validate(user)

    async def update_user(self, user_id: int, request: UserUpdateRequest) -> UserResponse:
        """Apply a partial update to a directory entry.

        Raises:
            UserNotFoundError: If the user does not exist.
            DuplicateUserError: If the new email or phone number is taken.
        """
        changes = request.model_dump(exclude_unset=True)

        cleared = sorted(
            field for field, value in changes.items()
            if value is None and field != "phone_number"
        )
        if cleared:
            raise ValidationError(f"{cleared[0]} cannot be cleared", field=cleared[0])

        async with unit_of_work(self.db):
            user = await self._get_by_id(user_id)

            if "email" in changes or "phone_number" in changes:
                await self._ensure_unique(
                    changes.get("email"),
                    changes.get("phone_number"),
                    exclude_user_id=user_id,
                )

            for field, value in changes.items():
                setattr(user, field, value)

        await self.db.refresh(user)

        logger.info("Updated user %s: %s", user_id, ", ".join(sorted(changes)) or "no changes")

        return UserResponse.model_validate(user)

    async def set_status(self, user_id: int, status: str) -> UserResponse:
        """Activate or deactivate a user.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        async with unit_of_work(self.db):
            user = await self._get_by_id(user_id)
            user.status = status

        await self.db.refresh(user)

        logger.info("Set user %s status to %s", user_id, status)

        return UserResponse.model_validate(user)

    async def _get_by_id(self, user_id: int) -> User:
        result = await self.db.execute(select(User).where(User.user_id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise UserNotFoundError(user_id)

        return user

    async def _ensure_unique(
        self,
        email: str | None,
        phone_number: str | None,
        exclude_user_id: int | None = None,
    ) -> None:
        conditions = []
        if email:
            conditions.append(User.email == email)
        if phone_number:
            conditions.append(User.phone_number == phone_number)
        if not conditions:
            return

        query = select(User).where(or_(*conditions))
        if exclude_user_id is not None:
            query = query.where(User.user_id != exclude_user_id)

        result = await self.db.execute(query.limit(1))
        existing = result.scalar_one_or_none()
        if existing is None:
            return

        if email and existing.email == email:
            raise DuplicateUserError("User already exists", {"field": "email"})
        raise DuplicateUserError("Phone number already in use", {"field": "phone_number"})
