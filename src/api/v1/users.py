# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User directory API endpoints.

This module provides endpoints for directory maintenance:
- POST / - Register a user
- GET /{user_id} - Get user details
- PUT /{user_id} - Update user
- PUT /{user_id}/status - Activate or deactivate a user

Only active users can be enrolled in or moved between batches.

Example:
    POST /api/v1/users/
    {
        "name": "Asha Rao",
        "email": "asha@school.example",
        "phone_number": "5550101",
        "role_id": 3
    }
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import RecordServiceDep
from src.models.user import (
    UserCreateRequest,
    UserResponse,
    UserStatusRequest,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def register_user(data: UserCreateRequest, records: RecordServiceDep) -> UserResponse:
    """Register a user. Email and phone number must be unused."""
    return await records.register_user(data)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user")
async def get_user(user_id: int, records: RecordServiceDep) -> UserResponse:
    return await records.get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse, summary="Update user")
async def update_user(
    user_id: int,
    data: UserUpdateRequest,
    records: RecordServiceDep,
) -> UserResponse:
    return await records.update_user(user_id, data)


@router.put("/{user_id}/status", response_model=UserResponse, summary="Set user status")
async def set_user_status(
    user_id: int,
    data: UserStatusRequest,
    records: RecordServiceDep,
) -> UserResponse:
    return await records.set_user_status(user_id, data.status)
