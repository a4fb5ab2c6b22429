# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Batch membership schemas.

Request bodies keep the `user_id` field name used by existing clients;
inside the engine the same value is the student id.
"""

import datetime as dt

from pydantic import BaseModel, Field

from src.models.common import PositiveId
from src.models.user import StudentSummary


class AddMembershipRequest(BaseModel):
    """Enroll a student in a batch."""

    user_id: PositiveId
    batch_id: PositiveId


class TransferRequest(BaseModel):
    """Move a student from one batch to another."""

    user_id: PositiveId
    old_batch_id: PositiveId
    new_batch_id: PositiveId


class RemoveMembershipRequest(BaseModel):
    """Remove a student from a batch."""

    user_id: PositiveId
    batch_id: PositiveId


class MembershipResponse(BaseModel):
    """A student's membership in a batch."""

    student_id: int
    batch_id: int
    created_at: dt.datetime | None = None
    student: StudentSummary | None = Field(
        default=None,
        description="Directory display fields, when the listing joins them",
    )


class MembershipChangeResponse(BaseModel):
    """Result of an add or transfer."""

    message: str
    membership: MembershipResponse


class BatchCount(BaseModel):
    """Active student count of one batch."""

    batch_id: int
    student_count: int


class BatchCountListResponse(BaseModel):
    """Active student counts across all batches."""

    batch_count: int = Field(description="Number of batches with active students")
    batches: list[BatchCount]


class DateCount(BaseModel):
    """Active memberships created on one calendar date."""

    date: dt.date
    student_count: int
