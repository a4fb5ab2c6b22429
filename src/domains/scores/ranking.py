# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ranking and statistics over a test's score records.

Pure functions: the service loads every record of one test in a single
query and passes the snapshot here.

De-duplication: storage allows more than one record per (test, student).
Only the most recently updated record of each pair takes part in ranking
and in the highest/lowest/average figures; ties on updated_at go to the
higher record_id.

Ordering: marks descending, then record_id ascending. Under the
positional policy that order alone decides the rank, so tied marks get
distinct sequential ranks. Under the competition policy tied marks share
the best rank and the next rank is skipped ("1224").
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Literal

from src.utils.datetime import ensure_utc

RankingPolicy = Literal["positional", "competition"]

POSITIONAL: RankingPolicy = "positional"
COMPETITION: RankingPolicy = "competition"

AVERAGE_QUANTUM = Decimal("0.01")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class RankResult:
    """Rank of one student within a test."""

    rank: int
    record: object
    ranked_students: int


@dataclass(frozen=True, slots=True)
class ScoreStatistics:
    """Aggregate figures of one test."""

    highest: Decimal
    lowest: Decimal
    average: Decimal
    record_count: int
    first_created_at: datetime | None
    last_updated_at: datetime | None


def _recency(record) -> tuple[datetime, int]:
    return (ensure_utc(record.updated_at) or _EPOCH, record.record_id)


def deduplicate(records: Iterable) -> list:
    """Keep the latest record of each (test_id, student_id) pair.

    Returns:
        The surviving records in no particular order.
    """
    latest: dict[tuple[int, int], object] = {}
    for record in records:
        key = (record.test_id, record.student_id)
        current = latest.get(key)
        if current is None or _recency(record) > _recency(current):
            latest[key] = record
    return list(latest.values())


def order_for_ranking(records: Iterable) -> list:
    """Sort by marks descending, record_id ascending."""
    return sorted(records, key=lambda r: (-Decimal(r.marks_obtained), r.record_id))


def rank_of(
    records: Sequence,
    student_id: int,
    policy: RankingPolicy = POSITIONAL,
) -> RankResult | None:
    """Rank a student among the records of one test.

    Args:
        records: Every record of the test, duplicates included.
        student_id: Student to rank.
        policy: "positional" or "competition".

    Returns:
        RankResult, or None if the student has no record.

    Raises:
        ValueError: If the policy is unknown.
    """
    if policy not in (POSITIONAL, COMPETITION):
        raise ValueError(f"Unknown ranking policy: {policy}")

    ordered = order_for_ranking(deduplicate(records))

    for position, record in enumerate(ordered, start=1):
        if record.student_id != student_id:
            continue

        if policy == COMPETITION:
            marks = Decimal(record.marks_obtained)
            rank = 1 + sum(1 for other in ordered if Decimal(other.marks_obtained) > marks)
        else:
            rank = position

        return RankResult(rank=rank, record=record, ranked_students=len(ordered))

    return None


def compute_statistics(records: Sequence) -> ScoreStatistics | None:
    """Compute highest, lowest and average marks of one test.

    The marks figures cover the de-duplicated records. The average is
    rounded half-even to two decimal places. The timestamps
    cover every stored record, so first_created_at is the first time any
    score for the test was recorded and last_updated_at the last time any
    was touched.

    Returns:
        ScoreStatistics, or None if there are no records.
    """
    if not records:
        return None

    survivors = deduplicate(records)
    marks = [Decimal(record.marks_obtained) for record in survivors]
    average = (sum(marks, Decimal("0")) / len(marks)).quantize(
        AVERAGE_QUANTUM, rounding=ROUND_HALF_EVEN
    )

    created = [ensure_utc(r.created_at) for r in records if r.created_at is not None]
    updated = [ensure_utc(r.updated_at) for r in records if r.updated_at is not None]

    return ScoreStatistics(
        highest=max(marks),
        lowest=min(marks),
        average=average,
        record_count=len(survivors),
        first_created_at=min(created) if created else None,
        last_updated_at=max(updated) if updated else None,
    )
