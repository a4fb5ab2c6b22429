# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee status API endpoints.

This module provides endpoints for the fee ledger:
- GET / - List all ledger rows
- GET /summary - Total students, total due and due today
- GET /upcoming-dues - Rows due after today
- GET /{fee_id} - Get a ledger row
- POST / - Create a ledger row
- PUT /{fee_id} - Update a ledger row
- DELETE /{fee_id} - Delete a ledger row
- POST /{fee_id}/payments - Record a payment
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import RecordServiceDep
from src.models.common import MessageResponse
from src.models.fee import (
    FeeStatusCreateRequest,
    FeeStatusResponse,
    FeeStatusUpdateRequest,
    FeeSummaryResponse,
    PaymentRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[FeeStatusResponse], summary="List fee statuses")
async def list_fee_statuses(records: RecordServiceDep) -> list[FeeStatusResponse]:
    return await records.list_fees()


@router.get("/summary", response_model=FeeSummaryResponse, summary="Fee summary")
async def fee_summary(records: RecordServiceDep) -> FeeSummaryResponse:
    """Ledger-wide totals as of the server's local date."""
    return await records.fee_summary()


@router.get(
    "/upcoming-dues",
    response_model=list[FeeStatusResponse],
    summary="Upcoming dues",
)
async def upcoming_dues(records: RecordServiceDep) -> list[FeeStatusResponse]:
    """Rows whose next due date is after today, soonest first."""
    return await records.upcoming_dues()


@router.get("/{fee_id}", response_model=FeeStatusResponse, summary="Get fee status")
async def get_fee_status(fee_id: int, records: RecordServiceDep) -> FeeStatusResponse:
    return await records.get_fee(fee_id)


@router.post(
    "/",
    response_model=FeeStatusResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create fee status",
)
async def create_fee_status(
    data: FeeStatusCreateRequest,
    records: RecordServiceDep,
) -> FeeStatusResponse:
    """Open a ledger row. remaining_fees is derived."""
    return await records.create_fee(data)


@router.put("/{fee_id}", response_model=FeeStatusResponse, summary="Update fee status")
async def update_fee_status(
    fee_id: int,
    data: FeeStatusUpdateRequest,
    records: RecordServiceDep,
) -> FeeStatusResponse:
    """Apply a partial update. remaining_fees is re-derived."""
    return await records.update_fee(fee_id, data)


@router.delete("/{fee_id}", response_model=MessageResponse, summary="Delete fee status")
async def delete_fee_status(fee_id: int, records: RecordServiceDep) -> MessageResponse:
    await records.delete_fee(fee_id)
    return MessageResponse(message="Fee status deleted successfully")


@router.post(
    "/{fee_id}/payments",
    response_model=FeeStatusResponse,
    summary="Record a payment",
)
async def record_payment(
    fee_id: int,
    data: PaymentRequest,
    records: RecordServiceDep,
) -> FeeStatusResponse:
    """Add a payment to fees_submitted and optionally move the due date."""
    return await records.record_payment(fee_id, data.amount, data.next_due_date)
