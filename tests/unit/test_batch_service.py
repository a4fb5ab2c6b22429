# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Batch membership service."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.domains.batch.service import BatchMembershipService
from src.domains.errors import (
    AlreadyInBatchError,
    InactiveOrMissingUserError,
    MembershipNotFoundError,
    NoActiveStudentsError,
)
from src.infrastructure.database.models import StudentBatch


def scalars_result(items: list) -> MagicMock:
    """Build an execute() result whose scalars().all() returns items."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = items
    return result


def membership(row_id: int, student_id: int, batch_id: int, day: int = 1) -> SimpleNamespace:
    return SimpleNamespace(
        id=row_id,
        student_id=student_id,
        batch_id=batch_id,
        created_at=datetime(2025, 1, day, 8, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def batch_service(mock_db, directory):
    """Create batch membership service with mock database and directory."""
    return BatchMembershipService(db=mock_db, directory=directory)


class TestListStudents:
    """Tests for active student listings."""

    @pytest.mark.asyncio
    async def test_filters_inactive_students(self, batch_service, mock_db, directory):
        """Test that only active students are listed."""
        directory.add(1, "active")
        directory.add(2, "inactive")
        mock_db.execute.return_value = scalars_result(
            [membership(10, 1, 5), membership(11, 2, 5)]
        )

        result = await batch_service.list_students(5)

        assert [m.student_id for m in result] == [1]
        assert result[0].student.name == "Student 1"
        assert result[0].student.status == "active"

    @pytest.mark.asyncio
    async def test_all_batches_omits_display_fields(self, batch_service, mock_db, directory):
        """Test that the unfiltered listing returns bare memberships."""
        directory.add(1)
        directory.add(3)
        mock_db.execute.return_value = scalars_result(
            [membership(10, 1, 5), membership(12, 3, 7)]
        )

        result = await batch_service.list_students()

        assert [(m.student_id, m.batch_id) for m in result] == [(1, 5), (3, 7)]
        assert all(m.student is None for m in result)

    @pytest.mark.asyncio
    async def test_empty_raises(self, batch_service, mock_db, directory):
        """Test that a batch of inactive students is reported as not found."""
        directory.add(2, "inactive")
        mock_db.execute.return_value = scalars_result([membership(11, 2, 5)])

        with pytest.raises(NoActiveStudentsError):
            await batch_service.list_students(5)


class TestAddMembership:
    """Tests for enrollment."""

    @pytest.mark.asyncio
    async def test_add_success(self, batch_service, mock_db, directory):
        """Test successful enrollment of an active student."""
        directory.add(1)

        result = await batch_service.add_membership(1, 5)

        added = mock_db.add.call_args[0][0]
        assert isinstance(added, StudentBatch)
        assert (added.student_id, added.batch_id) == (1, 5)
        assert result.batch_id == 5
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_add_missing_student(self, batch_service, mock_db):
        """Test that an unknown student cannot be enrolled."""
        with pytest.raises(InactiveOrMissingUserError) as exc_info:
            await batch_service.add_membership(99, 5)

        assert exc_info.value.exists is False
        mock_db.add.assert_not_called()
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_add_inactive_student(self, batch_service, mock_db, directory):
        """Test that an inactive student cannot be enrolled."""
        directory.add(2, "inactive")

        with pytest.raises(InactiveOrMissingUserError) as exc_info:
            await batch_service.add_membership(2, 5)

        assert exc_info.value.exists is True
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_does_not_check_existing_by_default(self, batch_service, mock_db, directory):
        """Test that enrollment does not query existing memberships by default."""
        directory.add(1)

        await batch_service.add_membership(1, 7)

        mock_db.execute.assert_not_awaited()
        mock_db.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_single_membership_enforced(self, mock_db, directory):
        """Test that an existing membership blocks enrollment when enforced."""
        directory.add(1)
        service = BatchMembershipService(mock_db, directory, enforce_single_membership=True)
        mock_db.execute.return_value = scalars_result([membership(10, 1, 5)])

        with pytest.raises(AlreadyInBatchError):
            await service.add_membership(1, 7)

        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_awaited()


class TestTransfer:
    """Tests for batch transfer."""

    @pytest.mark.asyncio
    async def test_transfer_success(self, batch_service, mock_db, directory):
        """Test that the membership row moves to the new batch."""
        directory.add(1)
        row = membership(10, 1, 5)
        mock_db.execute.side_effect = [scalars_result([row]), scalars_result([])]

        result = await batch_service.transfer(1, 5, 7)

        assert row.batch_id == 7
        assert result.batch_id == 7
        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transfer_membership_not_found(self, batch_service, mock_db, directory):
        """Test that a missing source membership aborts the transfer."""
        directory.add(1)
        mock_db.execute.return_value = scalars_result([])

        with pytest.raises(MembershipNotFoundError):
            await batch_service.transfer(1, 5, 7)

        mock_db.commit.assert_not_awaited()
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transfer_inactive_student_leaves_row_unchanged(
        self, batch_service, mock_db, directory
    ):
        """Test that an inactive student is not moved."""
        directory.add(1, "inactive")
        row = membership(10, 1, 5)
        mock_db.execute.return_value = scalars_result([row])

        with pytest.raises(InactiveOrMissingUserError):
            await batch_service.transfer(1, 5, 7)

        assert row.batch_id == 5
        mock_db.commit.assert_not_awaited()
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transfer_merges_into_existing_membership(
        self, batch_service, mock_db, directory
    ):
        """Test that the source row is dropped when the target already exists."""
        directory.add(1)
        source = membership(10, 1, 5)
        target = membership(11, 1, 7)
        mock_db.execute.side_effect = [scalars_result([source]), scalars_result([target])]

        result = await batch_service.transfer(1, 5, 7)

        mock_db.delete.assert_awaited_once_with(source)
        assert result.batch_id == 7

    @pytest.mark.asyncio
    async def test_transfer_collapses_duplicate_source_rows(
        self, batch_service, mock_db, directory
    ):
        """Test that duplicate source rows leave one membership in the target."""
        directory.add(1)
        first = membership(10, 1, 5)
        second = membership(11, 1, 5)
        mock_db.execute.side_effect = [scalars_result([first, second]), scalars_result([])]

        result = await batch_service.transfer(1, 5, 7)

        assert first.batch_id == 7
        assert second.batch_id == 5
        mock_db.delete.assert_awaited_once_with(second)
        assert result.batch_id == 7

    @pytest.mark.asyncio
    async def test_transfer_to_same_batch_is_noop(self, batch_service, mock_db, directory):
        """Test that transferring to the current batch changes nothing."""
        directory.add(1)
        row = membership(10, 1, 5)
        mock_db.execute.return_value = scalars_result([row])

        result = await batch_service.transfer(1, 5, 5)

        assert row.batch_id == 5
        assert result.batch_id == 5
        assert mock_db.execute.await_count == 1
        mock_db.delete.assert_not_awaited()


class TestRemoveMembership:
    """Tests for membership removal."""

    @pytest.mark.asyncio
    async def test_remove_success(self, batch_service, mock_db):
        result = MagicMock()
        result.rowcount = 1
        mock_db.execute.return_value = result

        assert await batch_service.remove_membership(1, 5) == 1
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remove_not_found(self, batch_service, mock_db):
        result = MagicMock()
        result.rowcount = 0
        mock_db.execute.return_value = result

        with pytest.raises(MembershipNotFoundError):
            await batch_service.remove_membership(1, 5)

        mock_db.commit.assert_not_awaited()


class TestCounts:
    """Tests for active student counts."""

    @pytest.mark.asyncio
    async def test_count_by_batch(self, batch_service, mock_db, directory):
        """Test per-batch counts only include active students."""
        directory.add(1)
        directory.add(2, "inactive")
        directory.add(3)
        directory.add(4, "inactive")
        mock_db.execute.return_value = scalars_result([
            membership(10, 1, 7),
            membership(11, 2, 7),
            membership(12, 3, 5),
            membership(13, 4, 9),
        ])

        result = await batch_service.count_by_batch()

        assert [(b.batch_id, b.student_count) for b in result.batches] == [(5, 1), (7, 1)]
        assert result.batch_count == 2

    @pytest.mark.asyncio
    async def test_count_single_batch_without_active_students(
        self, batch_service, mock_db, directory
    ):
        """Test that a batch with no active students reports zero."""
        directory.add(2, "inactive")
        mock_db.execute.return_value = scalars_result([membership(11, 2, 5)])

        result = await batch_service.count_by_batch(5)

        assert [(b.batch_id, b.student_count) for b in result.batches] == [(5, 0)]
        assert result.batch_count == 0

    @pytest.mark.asyncio
    async def test_count_by_date(self, batch_service, mock_db, directory):
        """Test counts grouped by enrollment date in ascending order."""
        for student_id in (1, 2, 3):
            directory.add(student_id)
        directory.add(4, "inactive")
        mock_db.execute.return_value = scalars_result([
            membership(10, 1, 5, day=3),
            membership(11, 2, 5, day=1),
            membership(12, 3, 5, day=3),
            membership(13, 4, 5, day=2),
        ])

        result = await batch_service.count_by_date(5)

        assert [(c.date.day, c.student_count) for c in result] == [(1, 1), (3, 2)]


class TestSearchByStudent:
    """Tests for student search."""

    @pytest.mark.asyncio
    async def test_search_active_student(self, batch_service, mock_db, directory):
        directory.add(1, name="Asha Rao")
        mock_db.execute.return_value = scalars_result([membership(10, 1, 5)])

        result = await batch_service.search_by_student(1)

        assert result[0].student.name == "Asha Rao"
        assert result[0].batch_id == 5

    @pytest.mark.asyncio
    async def test_search_inactive_student(self, batch_service, mock_db, directory):
        directory.add(2, "inactive")

        with pytest.raises(NoActiveStudentsError):
            await batch_service.search_by_student(2)

        mock_db.execute.assert_not_awaited()
