# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test score schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import PositiveId

RankingPolicy = Literal["positional", "competition"]

Marks = Annotated[Decimal, Field(ge=0, max_digits=7, decimal_places=2)]


class ScoreCreateRequest(BaseModel):
    """Record the marks a student obtained in a test."""

    test_id: PositiveId
    student_id: PositiveId
    marks_obtained: Marks


class ScoreUpdateRequest(BaseModel):
    """Correct a score record; unset fields are left unchanged."""

    test_id: PositiveId | None = None
    student_id: PositiveId | None = None
    marks_obtained: Marks | None = None


class ScoreRecordResponse(BaseModel):
    """Score record including both timestamps."""

    model_config = ConfigDict(from_attributes=True)

    record_id: int
    test_id: int
    student_id: int
    marks_obtained: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RankResponse(BaseModel):
    """Rank of a student within a test."""

    test_id: int
    student_id: int
    rank: int = Field(ge=1)
    marks_obtained: Decimal
    ranked_students: int = Field(description="Distinct students ranked in the test")
    policy: RankingPolicy


class ScoreStatisticsResponse(BaseModel):
    """Aggregate statistics of a test."""

    test_id: int
    highest: Decimal
    lowest: Decimal
    average: Decimal = Field(
        description="Mean of the latest marks per student, rounded half-even to 0.01"
    )
    record_count: int = Field(description="Distinct students the statistics cover")
    first_created_at: datetime | None = None
    last_updated_at: datetime | None = None
