# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User directory schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import PositiveId, StatusEnum


class UserCreateRequest(BaseModel):
    """Register a user in the directory."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: str | None = Field(default=None, max_length=32)
    role_id: PositiveId
    status: StatusEnum = "active"


class UserUpdateRequest(BaseModel):
    """Partial update of directory fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: str | None = Field(default=None, max_length=32)
    role_id: PositiveId | None = None
    status: StatusEnum | None = None


class UserStatusRequest(BaseModel):
    """Activate or deactivate a user."""

    status: StatusEnum


class UserResponse(BaseModel):
    """Directory entry."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    name: str
    email: str
    phone_number: str | None = None
    role_id: int
    status: StatusEnum
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StudentSummary(BaseModel):
    """Directory display fields joined onto membership results."""

    name: str
    email: str
    phone_number: str | None = None
    status: StatusEnum
