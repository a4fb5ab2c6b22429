# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee ledger service.

This module provides the FeeLedgerService class for:
- Fee ledger CRUD
- Recording payments against a ledger row
- Ledger-wide summary and upcoming dues

remaining_fees is always derived from total_fees and fees_submitted on
the write path. Aggregates are recomputed from storage on every call.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.errors import FeeStatusNotFoundError, ValidationError
from src.domains.fee import aggregation
from src.infrastructure.database.connection import unit_of_work
from src.infrastructure.database.models import FeeStatus
from src.models.fee import (
    FeeStatusCreateRequest,
    FeeStatusResponse,
    FeeStatusUpdateRequest,
    FeeSummaryResponse,
)
from src.utils.datetime import local_today

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("student_id", "total_fees", "fees_submitted")


def _validate_amounts(total: Decimal, submitted: Decimal) -> None:
    if total < 0:
        raise ValidationError("total_fees cannot be negative", field="total_fees")
    if submitted < 0:
        raise ValidationError("fees_submitted cannot be negative", field="fees_submitted")
    if submitted > total:
        raise ValidationError(
            "fees_submitted cannot exceed total_fees", field="fees_submitted"
        )


class FeeLedgerService:
    """Service for the per-student fee ledger.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_fees(self) -> list[FeeStatusResponse]:
        """List every ledger row ordered by id."""
        rows = await self._snapshot()
        return [FeeStatusResponse.model_validate(row) for row in rows]

    async def get_fee(self, fee_id: int) -> FeeStatusResponse:
        """Get a ledger row.

        Raises:
            FeeStatusNotFoundError: If the row does not exist.
        """
        fee = await self._get_by_id(fee_id)
        return FeeStatusResponse.model_validate(fee)

    async def create_fee(self, request: FeeStatusCreateRequest) -> FeeStatusResponse:
        """Open a ledger row.

        Raises:
            ValidationError: If an amount is negative or fees_submitted
                exceeds total_fees.
        """
        _validate_amounts(request.total_fees, request.fees_submitted)

        fee = FeeStatus(
            student_id=request.student_id,
            admission_date=request.admission_date,
            total_fees=request.total_fees,
            fees_submitted=request.fees_submitted,
            next_due_date=request.next_due_date,
        )
        fee.recompute_remaining()

        async with unit_of_work(self.db):
            self.db.add(fee)

        await self.db.refresh(fee)

        logger.info("Created fee status %s for student %s", fee.id, fee.student_id)

        return FeeStatusResponse.model_validate(fee)

    async def update_fee(
        self,
        fee_id: int,
        request: FeeStatusUpdateRequest,
    ) -> FeeStatusResponse:
        """Apply a partial update and re-derive remaining_fees.

        Raises:
            FeeStatusNotFoundError: If the row does not exist.
            ValidationError: If the resulting amounts are inconsistent.
        """
        async with unit_of_work(self.db):
            fee = await self._get_by_id(fee_id)
            changes = request.model_dump(exclude_unset=True)

            for field in _REQUIRED_FIELDS:
                if field in changes and changes[field] is None:
                    raise ValidationError(f"{field} cannot be cleared", field=field)

            total = changes.get("total_fees", fee.total_fees)
            submitted = changes.get("fees_submitted", fee.fees_submitted)
            _validate_amounts(Decimal(total), Decimal(submitted))

            for field, value in changes.items():
                setattr(fee, field, value)
            fee.recompute_remaining()

        await self.db.refresh(fee)

        logger.info("Updated fee status %s: %s", fee_id, sorted(changes))

        return FeeStatusResponse.model_validate(fee)

    async def delete_fee(self, fee_id: int) -> None:
        """Delete a ledger row.

        Raises:
            FeeStatusNotFoundError: If the row does not exist.
        """
        async with unit_of_work(self.db):
            fee = await self._get_by_id(fee_id)
            await self.db.delete(fee)

        logger.info("Deleted fee status %s", fee_id)

    async def record_payment(
        self,
        fee_id: int,
        amount: Decimal,
        next_due_date: date | None = None,
    ) -> FeeStatusResponse:
        """Add a payment to fees_submitted.

        Args:
            fee_id: Ledger row id.
            amount: Positive payment amount.
            next_due_date: New due date, if the payment moves it.

        Raises:
            FeeStatusNotFoundError: If the row does not exist.
            ValidationError: If the amount is not positive or would
                overpay the row.
        """
        amount = Decimal(amount)
        if amount <= 0:
            raise ValidationError("Payment amount must be positive", field="amount")

        async with unit_of_work(self.db):
            fee = await self._get_by_id(fee_id)
            submitted = Decimal(fee.fees_submitted) + amount
            _validate_amounts(Decimal(fee.total_fees), submitted)

            fee.fees_submitted = submitted
            if next_due_date is not None:
                fee.next_due_date = next_due_date
            fee.recompute_remaining()

        await self.db.refresh(fee)

        logger.info(
            "Recorded payment of %s on fee status %s, remaining %s",
            amount,
            fee_id,
            fee.remaining_fees,
        )

        return FeeStatusResponse.model_validate(fee)

    async def summary(self) -> FeeSummaryResponse:
        """Totals over the whole ledger as of today's local date."""
        rows = await self._snapshot()
        result = aggregation.summarize(rows, local_today())
        return FeeSummaryResponse(
            total_students=result.total_students,
            total_due_fee=result.total_due_fee,
            total_due_today=result.total_due_today,
        )

    async def upcoming_dues(self) -> list[FeeStatusResponse]:
        """Rows due after today, soonest first."""
        rows = await self._snapshot()
        return [
            FeeStatusResponse.model_validate(row)
            for row in aggregation.upcoming_dues(rows, local_today())
        ]

    async def _snapshot(self) -> list[FeeStatus]:
        result = await self.db.execute(select(FeeStatus).order_by(FeeStatus.id))
        return list(result.scalars().all())

    async def _get_by_id(self, fee_id: int) -> FeeStatus:
        result = await self.db.execute(select(FeeStatus).where(FeeStatus.id == fee_id))
        fee = result.scalar_one_or_none()
        if fee is None:
            raise FeeStatusNotFoundError(fee_id)
        return fee
