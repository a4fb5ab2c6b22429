# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Batch membership service.

This module provides the BatchMembershipService class for:
- Listing active students, across all batches or within one batch
- Enrolling a student in a batch
- Transferring a student between batches as one unit of work
- Removing memberships
- Counting active students per batch and per enrollment date

The storage schema has no uniqueness constraint on the student, so the
"one current batch per student" rule is kept here: transfers lock the
source rows and merge into an existing target membership instead of
duplicating it, and single-membership enforcement on enrollment can be
switched on through settings.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.directory.gateway import DirectoryGateway, UserRecord
from src.domains.errors import (
    AlreadyInBatchError,
    InactiveOrMissingUserError,
    MembershipNotFoundError,
    NoActiveStudentsError,
)
from src.infrastructure.database.connection import unit_of_work
from src.infrastructure.database.models import StudentBatch
from src.models.batch import (
    BatchCount,
    BatchCountListResponse,
    DateCount,
    MembershipResponse,
)
from src.models.user import StudentSummary
from src.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class BatchMembershipService:
    """Service for managing which batch a student belongs to.

    Attributes:
        db: Async database session.
        directory: Gateway used to check user existence and activity.
        enforce_single_membership: Reject enrolling a student who already
            has a membership.
    """

    def __init__(
        self,
        db: AsyncSession,
        directory: DirectoryGateway,
        enforce_single_membership: bool = False,
    ) -> None:
        """Initialize batch membership service.

        Args:
            db: Async database session for the records database.
            directory: Directory gateway capability.
            enforce_single_membership: Enable the enrollment uniqueness check.
        """
        self.db = db
        self.directory = directory
        self.enforce_single_membership = enforce_single_membership

    async def list_students(self, batch_id: int | None = None) -> list[MembershipResponse]:
        """List memberships of active students.

        Listings within one batch include the students' directory
        display fields.

        Args:
            batch_id: Restrict to this batch. None lists every batch.

        Returns:
            Memberships ordered by enrollment.

        Raises:
            NoActiveStudentsError: If no active student matched.
        """
        rows = await self._fetch_memberships(batch_id=batch_id)
        active = await self.directory.find_active_users(row.student_id for row in rows)

        include_student = batch_id is not None
        items = [
            self._to_response(row, active[row.student_id] if include_student else None)
            for row in rows
            if row.student_id in active
        ]

        if not items:
            if batch_id is None:
                raise NoActiveStudentsError("No active students found")
            raise NoActiveStudentsError(
                f"No active students found in batch {batch_id}",
                {"batch_id": batch_id},
            )

        return items

    async def add_membership(self, student_id: int, batch_id: int) -> MembershipResponse:
        """Enroll an active student in a batch.

        Args:
            student_id: Student identifier.
            batch_id: Batch identifier.

        Returns:
            The new membership.

        Raises:
            InactiveOrMissingUserError: If the student is missing or inactive.
            AlreadyInBatchError: If single membership is enforced and the
                student already belongs to a batch.
        """
        async with unit_of_work(self.db):
            student = await self._require_active(student_id)

            if self.enforce_single_membership:
                existing = await self._fetch_memberships(student_id=student_id)
                if existing:
                    raise AlreadyInBatchError(student_id, existing[0].batch_id)

            membership = StudentBatch(student_id=student_id, batch_id=batch_id)
            self.db.add(membership)

        await self.db.refresh(membership)

        logger.info("Added student %s to batch %s", student_id, batch_id)

        return self._to_response(membership, student)

    async def transfer(
        self,
        student_id: int,
        old_batch_id: int,
        new_batch_id: int,
    ) -> MembershipResponse:
        """Move a student from one batch to another.

        The membership rows are locked, the student's status is checked
        and the rows are moved inside one unit of work. Any failure rolls
        everything back, leaving the pre-transfer membership intact.

        If the student already has a membership in the target batch, the
        source rows are dropped instead of moved so the student ends up
        with a single membership there. Otherwise one source row is moved
        and any duplicate source rows are deleted.

        Args:
            student_id: Student identifier.
            old_batch_id: Batch the student currently belongs to.
            new_batch_id: Destination batch.

        Returns:
            The student's membership in the destination batch.

        Raises:
            MembershipNotFoundError: If the student is not in old_batch_id.
            InactiveOrMissingUserError: If the student is missing or inactive.
        """
        async with unit_of_work(self.db):
            source = await self._fetch_memberships(
                student_id=student_id,
                batch_id=old_batch_id,
                for_update=True,
            )
            if not source:
                raise MembershipNotFoundError(student_id, old_batch_id)

            student = await self._require_active(student_id)

            if old_batch_id == new_batch_id:
                target = source[0]
            else:
                existing = await self._fetch_memberships(
                    student_id=student_id,
                    batch_id=new_batch_id,
                    for_update=True,
                )
                if existing:
                    for row in source:
                        await self.db.delete(row)
                    target = existing[0]
                else:
                    target, *duplicates = source
                    target.batch_id = new_batch_id
                    for row in duplicates:
                        await self.db.delete(row)

        await self.db.refresh(target)

        logger.info(
            "Transferred student %s from batch %s to batch %s",
            student_id,
            old_batch_id,
            new_batch_id,
        )

        return self._to_response(target, student)

    async def remove_membership(self, student_id: int, batch_id: int) -> int:
        """Remove a student from a batch.

        Args:
            student_id: Student identifier.
            batch_id: Batch identifier.

        Returns:
            Number of membership rows deleted.

        Raises:
            MembershipNotFoundError: If no membership matched.
        """
        async with unit_of_work(self.db):
            result = await self.db.execute(
                delete(StudentBatch).where(
                    StudentBatch.student_id == student_id,
                    StudentBatch.batch_id == batch_id,
                )
            )
            if not result.rowcount:
                raise MembershipNotFoundError(student_id, batch_id)

        logger.info("Removed student %s from batch %s", student_id, batch_id)

        return result.rowcount

    async def count_by_batch(self, batch_id: int | None = None) -> BatchCountListResponse:
        """Count active students per batch.

        Args:
            batch_id: Count only this batch. A batch without active
                students reports a count of zero.

        Returns:
            One count per batch, ordered by batch id.
        """
        rows = await self._fetch_memberships(batch_id=batch_id)
        active = await self.directory.find_active_users(row.student_id for row in rows)

        counts = Counter(row.batch_id for row in rows if row.student_id in active)
        if batch_id is not None and batch_id not in counts:
            counts[batch_id] = 0

        batches = [
            BatchCount(batch_id=key, student_count=counts[key])
            for key in sorted(counts)
        ]
        return BatchCountListResponse(
            batch_count=sum(1 for item in batches if item.student_count),
            batches=batches,
        )

    async def count_by_date(self, batch_id: int) -> list[DateCount]:
        """Count active memberships of a batch per enrollment date.

        Args:
            batch_id: Batch identifier.

        Returns:
            Counts ordered by ascending date. Empty if none.
        """
        rows = await self._fetch_memberships(batch_id=batch_id)
        active = await self.directory.find_active_users(row.student_id for row in rows)

        counts = Counter(
            ensure_utc(row.created_at).date()
            for row in rows
            if row.student_id in active and row.created_at is not None
        )
        return [DateCount(date=day, student_count=counts[day]) for day in sorted(counts)]

    async def search_by_student(self, student_id: int) -> list[MembershipResponse]:
        """Get every membership of an active student with display fields.

        Args:
            student_id: Student identifier.

        Returns:
            Memberships ordered by enrollment.

        Raises:
            NoActiveStudentsError: If the student is inactive, missing or
                has no membership.
        """
        student = await self.directory.find_active_user(student_id)
        rows = await self._fetch_memberships(student_id=student_id) if student else []

        if not rows:
            raise NoActiveStudentsError(
                f"No active student found with User ID {student_id}",
                {"student_id": student_id},
            )

        return [self._to_response(row, student) for row in rows]

    async def _require_active(self, student_id: int) -> UserRecord:
        """Get an active student from the directory.

        Raises:
            InactiveOrMissingUserError: If missing or inactive.
        """
        student = await self.directory.find_user(student_id)
        if student is None or not student.is_active:
            raise InactiveOrMissingUserError(student_id, exists=student is not None)
        return student

    async def _fetch_memberships(
        self,
        student_id: int | None = None,
        batch_id: int | None = None,
        for_update: bool = False,
    ) -> Sequence[StudentBatch]:
        """Load membership rows matching the given filters, oldest first."""
        query = select(StudentBatch)

        if student_id is not None:
            query = query.where(StudentBatch.student_id == student_id)
        if batch_id is not None:
            query = query.where(StudentBatch.batch_id == batch_id)
        if for_update:
            query = query.with_for_update()

        query = query.order_by(StudentBatch.id)

        result = await self.db.execute(query)
        return result.scalars().all()

    @staticmethod
    def _to_response(
        membership: StudentBatch,
        student: UserRecord | None = None,
    ) -> MembershipResponse:
        """Convert membership model to response DTO."""
        summary = None
        if student is not None:
            summary = StudentSummary(
                name=student.name,
                email=student.email,
                phone_number=student.phone_number,
                status=student.status,
            )

        return MembershipResponse(
            student_id=membership.student_id,
            batch_id=membership.batch_id,
            created_at=ensure_utc(membership.created_at),
            student=summary,
        )
