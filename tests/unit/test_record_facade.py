# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the Record service facade."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from src.core.config.settings import RecordSettings, Settings
from src.domains.errors import (
    InternalError,
    NoActiveStudentsError,
    OperationTimeoutError,
    ValidationError,
)
from src.domains.records import RecordService, validate_amount, validate_id


@pytest.fixture
def records(mock_db, directory):
    """Create record facade with mock database and in-memory directory."""
    return RecordService(mock_db, directory, timeout=1.0)


class TestValidateId:
    """Tests for identifier validation."""

    @pytest.mark.parametrize(("value", "expected"), [(7, 7), ("42", 42), (" 5 ", 5)])
    def test_accepts_positive_integers(self, value, expected):
        assert validate_id(value, "batch_id") == expected

    @pytest.mark.parametrize("value", [None, 0, -3, "abc", "4.5", "", 2.0, True, "-1"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_id(value, "batch_id")

        assert exc_info.value.field == "batch_id"


class TestValidateAmount:
    """Tests for payment amount validation."""

    @pytest.mark.parametrize(("value", "expected"), [("12.50", Decimal("12.50")), (3, Decimal("3"))])
    def test_accepts_positive_decimals(self, value, expected):
        assert validate_amount(value) == expected

    @pytest.mark.parametrize("value", ["0", "-1", "NaN", "ten", 1.5, None])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_amount(value)


class TestFailurePolicy:
    """Tests for deadlines, rollback and error translation."""

    @pytest.mark.asyncio
    async def test_invalid_id_rejected_before_storage(self, records, mock_db):
        with pytest.raises(ValidationError):
            await records.transfer("abc", 5, 7)

        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deadline_exceeded(self, records, mock_db):
        """Test that a slow operation raises OperationTimeoutError and rolls back."""

        async def slow_summary():
            await asyncio.sleep(5)

        records.fees.summary = slow_summary

        with pytest.raises(OperationTimeoutError) as exc_info:
            await records.fee_summary(timeout=0.05)

        assert exc_info.value.details["operation"] == "fee_summary"
        mock_db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_becomes_internal_error(self, records, mock_db):
        """Test that storage errors are hidden behind a generic message."""
        mock_db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))

        with pytest.raises(InternalError) as exc_info:
            await records.list_fees()

        assert exc_info.value.message == "Internal server error"
        assert "db down" not in str(exc_info.value)
        mock_db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_domain_error_propagates_after_rollback(self, records, mock_db):
        records.batches.search_by_student = AsyncMock(
            side_effect=NoActiveStudentsError("No active student found with User ID 3")
        )

        with pytest.raises(NoActiveStudentsError):
            await records.search_by_student("3")

        records.batches.search_by_student.assert_awaited_once_with(3)
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, records):
        with pytest.raises(ValidationError):
            await records.set_user_status(1, "suspended")

    @pytest.mark.asyncio
    async def test_non_positive_timeout_rejected(self, records):
        with pytest.raises(ValidationError):
            await records.list_fees(timeout=0)


class TestFromSettings:
    """Tests for settings-driven construction."""

    def test_applies_record_settings(self, mock_db, directory):
        settings = Settings(
            records=RecordSettings(
                operation_timeout_seconds=2.5,
                ranking_policy="competition",
                enforce_single_membership=True,
            )
        )

        records = RecordService.from_settings(mock_db, settings, directory)

        assert records.timeout == 2.5
        assert records.scores.ranking_policy == "competition"
        assert records.batches.enforce_single_membership is True
        assert records.batches.directory is directory
