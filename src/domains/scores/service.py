# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test score service.

This module provides the ScoreRankingService class for:
- Recording and correcting a student's marks in a test
- Listing score records by test or by student
- Ranking a student within a test
- Test statistics (highest, lowest, average)

Rank and statistics read all records of a test in one query and compute
from that snapshot; see src.domains.scores.ranking for the rules.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.errors import (
    NoRecordsError,
    NoRecordsForTestError,
    RecordNotFoundError,
    ValidationError,
)
from src.domains.scores import ranking
from src.infrastructure.database.connection import unit_of_work
from src.infrastructure.database.models import StudentTestRecord
from src.models.score import (
    RankResponse,
    ScoreCreateRequest,
    ScoreRecordResponse,
    ScoreStatisticsResponse,
    ScoreUpdateRequest,
)

logger = logging.getLogger(__name__)


class ScoreRankingService:
    """Service for test score records and rankings.

    Attributes:
        db: Async database session.
        ranking_policy: "positional" or "competition".
    """

    def __init__(
        self,
        db: AsyncSession,
        ranking_policy: ranking.RankingPolicy = ranking.POSITIONAL,
    ) -> None:
        """Initialize score service.

        Args:
            db: Async database session for the records database.
            ranking_policy: How tied marks are ranked.

        Raises:
            ValueError: If the policy is unknown.
        """
        if ranking_policy not in (ranking.POSITIONAL, ranking.COMPETITION):
            raise ValueError(f"Unknown ranking policy: {ranking_policy}")
        self.db = db
        self.ranking_policy = ranking_policy

    async def record_score(self, request: ScoreCreateRequest) -> ScoreRecordResponse:
        """Insert a score record.

        A student may end up with several records for the same test;
        the latest one counts for ranking.
        """
        record = StudentTestRecord(
            test_id=request.test_id,
            student_id=request.student_id,
            marks_obtained=request.marks_obtained,
        )

        async with unit_of_work(self.db):
            self.db.add(record)

        await self.db.refresh(record)

        logger.info(
            "Recorded %s marks for student %s in test %s",
            record.marks_obtained,
            record.student_id,
            record.test_id,
        )

        return ScoreRecordResponse.model_validate(record)

    async def update_score(
        self,
        record_id: int,
        request: ScoreUpdateRequest,
    ) -> ScoreRecordResponse:
        """Replace the supplied fields of a score record.

        Raises:
            RecordNotFoundError: If the record does not exist.
            ValidationError: If a field is explicitly cleared.
        """
        changes = request.model_dump(exclude_unset=True)
        cleared = sorted(field for field, value in changes.items() if value is None)
        if cleared:
            raise ValidationError(f"{cleared[0]} cannot be cleared", field=cleared[0])

        async with unit_of_work(self.db):
            result = await self.db.execute(
                select(StudentTestRecord).where(StudentTestRecord.record_id == record_id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise RecordNotFoundError(
                    "Test record not found", {"record_id": record_id}
                )

            for field, value in changes.items():
                setattr(record, field, value)

        await self.db.refresh(record)

        logger.info("Updated test record %s: %s", record_id, sorted(changes))

        return ScoreRecordResponse.model_validate(record)

    async def list_records(self) -> list[ScoreRecordResponse]:
        """List every score record.

        Raises:
            NoRecordsError: If there are none.
        """
        records = await self._fetch()
        if not records:
            raise NoRecordsError("No test records found")
        return [ScoreRecordResponse.model_validate(r) for r in records]

    async def list_by_test(self, test_id: int) -> list[ScoreRecordResponse]:
        """List the score records of a test.

        Raises:
            NoRecordsError: If the test has none.
        """
        records = await self._fetch(test_id=test_id)
        if not records:
            raise NoRecordsError(
                f"No records found for test ID {test_id}", {"test_id": test_id}
            )
        return [ScoreRecordResponse.model_validate(r) for r in records]

    async def list_by_student(self, student_id: int) -> list[ScoreRecordResponse]:
        """List the score records of a student.

        Raises:
            NoRecordsError: If the student has none.
        """
        records = await self._fetch(student_id=student_id)
        if not records:
            raise NoRecordsError(
                f"No records found for user ID {student_id}",
                {"student_id": student_id},
            )
        return [ScoreRecordResponse.model_validate(r) for r in records]

    async def rank(self, test_id: int, student_id: int) -> RankResponse:
        """Rank a student within a test.

        Raises:
            NoRecordsForTestError: If the test has no records.
            RecordNotFoundError: If the student has no record in the test.
        """
        records = await self._fetch(test_id=test_id)
        if not records:
            raise NoRecordsForTestError(test_id)

        result = ranking.rank_of(records, student_id, self.ranking_policy)
        if result is None:
            raise RecordNotFoundError(
                f"User ID {student_id} not found in test ID {test_id}.",
                {"test_id": test_id, "student_id": student_id},
            )

        return RankResponse(
            test_id=test_id,
            student_id=student_id,
            rank=result.rank,
            marks_obtained=result.record.marks_obtained,
            ranked_students=result.ranked_students,
            policy=self.ranking_policy,
        )

    async def statistics(self, test_id: int) -> ScoreStatisticsResponse:
        """Highest, lowest and average marks of a test.

        Raises:
            NoRecordsForTestError: If the test has no records.
        """
        records = await self._fetch(test_id=test_id)
        stats = ranking.compute_statistics(records)
        if stats is None:
            raise NoRecordsForTestError(test_id)

        return ScoreStatisticsResponse(
            test_id=test_id,
            highest=stats.highest,
            lowest=stats.lowest,
            average=stats.average,
            record_count=stats.record_count,
            first_created_at=stats.first_created_at,
            last_updated_at=stats.last_updated_at,
        )

    async def _fetch(
        self,
        test_id: int | None = None,
        student_id: int | None = None,
    ) -> list[StudentTestRecord]:
        query = select(StudentTestRecord)
        if test_id is not None:
            query = query.where(StudentTestRecord.test_id == test_id)
        if student_id is not None:
            query = query.where(StudentTestRecord.student_id == student_id)
        query = query.order_by(StudentTestRecord.record_id)

        result = await self.db.execute(query)
        return list(result.scalars().all())
