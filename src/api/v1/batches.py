# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student batch membership API endpoints.

This module provides endpoints for batch membership:
- GET /students - List active students across all batches
- GET /students/batch/{batch_id} - List active students of a batch
- POST /students/batch - Add a student to a batch
- PUT /update - Transfer a student between batches
- DELETE /students/batch - Remove a student from a batch
- GET /students/search/{user_id} - Memberships of an active student

Count endpoints:
- GET /batches/count - Active student count per batch
- GET /batches/{batch_id}/count - Active student count of one batch
- GET /student-counts/{batch_id} - Active memberships per enrollment date
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import RecordServiceDep
from src.models.batch import (
    AddMembershipRequest,
    BatchCount,
    BatchCountListResponse,
    DateCount,
    MembershipChangeResponse,
    MembershipResponse,
    RemoveMembershipRequest,
    TransferRequest,
)
from src.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/students",
    response_model=list[MembershipResponse],
    summary="List active students",
)
async def list_students(records: RecordServiceDep) -> list[MembershipResponse]:
    """List memberships of every active student."""
    return await records.list_students()


@router.get(
    "/students/batch/{batch_id}",
    response_model=list[MembershipResponse],
    summary="List active students of a batch",
)
async def list_batch_students(
    batch_id: int,
    records: RecordServiceDep,
) -> list[MembershipResponse]:
    """List active students of a batch with their directory details."""
    return await records.list_students(batch_id)


@router.post(
    "/students/batch",
    response_model=MembershipChangeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a student to a batch",
)
async def add_student_to_batch(
    data: AddMembershipRequest,
    records: RecordServiceDep,
) -> MembershipChangeResponse:
    """Enroll an active student in a batch."""
    membership = await records.add_membership(data.user_id, data.batch_id)
    return MembershipChangeResponse(
        message="Student added to batch successfully",
        membership=membership,
    )


@router.put(
    "/update",
    response_model=MembershipChangeResponse,
    summary="Transfer a student between batches",
)
async def transfer_student(
    data: TransferRequest,
    records: RecordServiceDep,
) -> MembershipChangeResponse:
    """Move a student from old_batch_id to new_batch_id."""
    membership = await records.transfer(data.user_id, data.old_batch_id, data.new_batch_id)
    return MembershipChangeResponse(
        message="Batch updated successfully",
        membership=membership,
    )


@router.delete(
    "/students/batch",
    response_model=MessageResponse,
    summary="Remove a student from a batch",
)
async def remove_student_from_batch(
    data: RemoveMembershipRequest,
    records: RecordServiceDep,
) -> MessageResponse:
    """Delete a student's membership in a batch."""
    await records.remove_membership(data.user_id, data.batch_id)
    return MessageResponse(message="Student removed from batch successfully")


@router.get(
    "/students/search/{user_id}",
    response_model=list[MembershipResponse],
    summary="Search memberships of a student",
)
async def search_student(
    user_id: int,
    records: RecordServiceDep,
) -> list[MembershipResponse]:
    """Memberships of an active student with directory details."""
    return await records.search_by_student(user_id)


@router.get(
    "/batches/count",
    response_model=BatchCountListResponse,
    summary="Count active students per batch",
)
async def count_all_batches(records: RecordServiceDep) -> BatchCountListResponse:
    return await records.count_by_batch()


@router.get(
    "/batches/{batch_id}/count",
    response_model=BatchCount,
    summary="Count active students in a batch",
)
async def count_batch(batch_id: int, records: RecordServiceDep) -> BatchCount:
    result = await records.count_by_batch(batch_id)
    return result.batches[0]


@router.get(
    "/student-counts/{batch_id}",
    response_model=list[DateCount],
    summary="Count active memberships per enrollment date",
)
async def count_batch_by_date(batch_id: int, records: RecordServiceDep) -> list[DateCount]:
    return await records.count_by_date(batch_id)
