# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test record API endpoints.

This module provides endpoints for test scores:
- POST / - Record a score
- GET / - List all score records
- GET /test/{test_id} - Score records of a test
- GET /user/{user_id} - Score records of a student
- PUT /{record_id} - Correct a score record
- GET /rank/{test_id}/{user_id} - Rank of a student in a test
- GET /statistics/{test_id} - Highest, lowest and average marks
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import RecordServiceDep
from src.models.score import (
    RankResponse,
    ScoreCreateRequest,
    ScoreRecordResponse,
    ScoreStatisticsResponse,
    ScoreUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=ScoreRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a score",
)
async def create_record(
    data: ScoreCreateRequest,
    records: RecordServiceDep,
) -> ScoreRecordResponse:
    return await records.record_score(data)


@router.get("/", response_model=list[ScoreRecordResponse], summary="List score records")
async def list_records(records: RecordServiceDep) -> list[ScoreRecordResponse]:
    return await records.list_scores()


@router.get(
    "/test/{test_id}",
    response_model=list[ScoreRecordResponse],
    summary="Score records of a test",
)
async def list_records_by_test(
    test_id: int,
    records: RecordServiceDep,
) -> list[ScoreRecordResponse]:
    return await records.list_scores_by_test(test_id)


@router.get(
    "/user/{user_id}",
    response_model=list[ScoreRecordResponse],
    summary="Score records of a student",
)
async def list_records_by_user(
    user_id: int,
    records: RecordServiceDep,
) -> list[ScoreRecordResponse]:
    return await records.list_scores_by_student(user_id)


@router.put("/{record_id}", response_model=ScoreRecordResponse, summary="Update a score record")
async def update_record(
    record_id: int,
    data: ScoreUpdateRequest,
    records: RecordServiceDep,
) -> ScoreRecordResponse:
    return await records.update_score(record_id, data)


@router.get(
    "/rank/{test_id}/{user_id}",
    response_model=RankResponse,
    summary="Rank of a student in a test",
)
async def get_rank(test_id: int, user_id: int, records: RecordServiceDep) -> RankResponse:
    """Rank by marks descending; equal marks are ordered by record id."""
    return await records.rank(test_id, user_id)


@router.get(
    "/statistics/{test_id}",
    response_model=ScoreStatisticsResponse,
    summary="Test statistics",
)
async def get_statistics(test_id: int, records: RecordServiceDep) -> ScoreStatisticsResponse:
    return await records.statistics(test_id)
