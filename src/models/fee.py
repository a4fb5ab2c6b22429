# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee ledger schemas.

Monetary values are Decimal end to end. remaining_fees is never accepted
from callers; the ledger derives it from total and submitted amounts.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.models.common import PositiveId

Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
PaymentAmount = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]


class FeeStatusCreateRequest(BaseModel):
    """Open a fee ledger row at admission."""

    student_id: PositiveId
    admission_date: date | None = None
    total_fees: Money
    fees_submitted: Money = Decimal("0")
    next_due_date: date | None = None

    @model_validator(mode="after")
    def validate_submitted_within_total(self) -> Self:
        if self.fees_submitted > self.total_fees:
            raise ValueError("fees_submitted cannot exceed total_fees")
        return self


class FeeStatusUpdateRequest(BaseModel):
    """Partial update; unset fields keep their stored value."""

    student_id: PositiveId | None = None
    admission_date: date | None = None
    total_fees: Money | None = None
    fees_submitted: Money | None = None
    next_due_date: date | None = None


class PaymentRequest(BaseModel):
    """A payment event against a ledger row."""

    amount: PaymentAmount
    next_due_date: date | None = None


class FeeStatusResponse(BaseModel):
    """Fee ledger row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    admission_date: date | None = None
    total_fees: Decimal
    fees_submitted: Decimal
    remaining_fees: Decimal
    next_due_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FeeSummaryResponse(BaseModel):
    """Point-in-time aggregate over all fee rows."""

    total_students: int
    total_due_fee: Decimal
    total_due_today: Decimal
