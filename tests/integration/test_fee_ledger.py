# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the fee ledger against an in-memory database."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from src.domains.errors import FeeStatusNotFoundError, ValidationError
from src.domains.records import RecordService
from src.models.fee import FeeStatusCreateRequest, FeeStatusUpdateRequest

pytestmark = pytest.mark.integration

TODAY = date(2025, 6, 15)


def opening(student_id: int, total: str, submitted: str, due: date | None = None):
    return FeeStatusCreateRequest(
        student_id=student_id,
        admission_date=date(2025, 4, 1),
        total_fees=Decimal(total),
        fees_submitted=Decimal(submitted),
        next_due_date=due,
    )


class TestFeeRoundTrip:
    """remaining_fees follows total and submitted through every write."""

    @pytest.mark.asyncio
    async def test_create_and_settle(self, db_session):
        records = RecordService(db_session)

        created = await records.create_fee(opening(1, "1000", "400"))
        assert created.remaining_fees == Decimal("600")

        updated = await records.update_fee(
            created.id, FeeStatusUpdateRequest(fees_submitted=Decimal("1000"))
        )
        assert updated.remaining_fees == Decimal("0")

        fetched = await records.get_fee(str(created.id))
        assert fetched.fees_submitted == Decimal("1000")
        assert fetched.remaining_fees == Decimal("0")

    @pytest.mark.asyncio
    async def test_payment(self, db_session):
        records = RecordService(db_session)
        created = await records.create_fee(opening(1, "1000", "400", date(2025, 6, 1)))

        paid = await records.record_payment(created.id, "150.50", date(2025, 7, 1))

        assert paid.fees_submitted == Decimal("550.50")
        assert paid.remaining_fees == Decimal("449.50")
        assert paid.next_due_date == date(2025, 7, 1)

    @pytest.mark.asyncio
    async def test_rejected_update_keeps_row(self, db_session):
        records = RecordService(db_session)
        created = await records.create_fee(opening(1, "1000", "400"))

        with pytest.raises(ValidationError):
            await records.update_fee(
                created.id, FeeStatusUpdateRequest(total_fees=Decimal("100"))
            )

        fetched = await records.get_fee(created.id)
        assert fetched.total_fees == Decimal("1000")
        assert fetched.remaining_fees == Decimal("600")

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        records = RecordService(db_session)
        created = await records.create_fee(opening(1, "10", "0"))

        await records.delete_fee(created.id)

        with pytest.raises(FeeStatusNotFoundError):
            await records.get_fee(created.id)


class TestFeeAggregates:
    """Summary and upcoming dues over stored rows."""

    @pytest.mark.asyncio
    async def test_summary_and_upcoming(self, db_session):
        records = RecordService(db_session)
        await records.create_fee(opening(1, "1000", "400", TODAY))
        await records.create_fee(opening(2, "500", "100", date(2025, 8, 1)))
        await records.create_fee(opening(3, "300", "300", date(2025, 7, 1)))
        await records.create_fee(opening(4, "200", "0"))

        with patch("src.domains.fee.service.local_today", return_value=TODAY):
            summary = await records.fee_summary()
            upcoming = await records.upcoming_dues()

        assert summary.total_students == 4
        assert summary.total_due_fee == Decimal("1200")
        assert summary.total_due_today == Decimal("600")
        assert [row.student_id for row in upcoming] == [3, 2]

    @pytest.mark.asyncio
    async def test_empty_summary(self, db_session):
        records = RecordService(db_session)

        summary = await records.fee_summary()

        assert summary.total_students == 0
        assert summary.total_due_fee == Decimal("0")
