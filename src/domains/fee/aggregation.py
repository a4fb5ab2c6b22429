# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee ledger aggregates.

Pure functions over a snapshot of ledger rows. The service reads the
snapshot inside one transaction and hands it here, so every aggregate
reflects a single point in time and can be tested without a database.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class FeeSummary:
    """Totals over the whole ledger."""

    total_students: int
    total_due_fee: Decimal
    total_due_today: Decimal


def summarize(rows: Sequence, today: date) -> FeeSummary:
    """Compute ledger totals.

    total_students counts every row regardless of student status.
    Sums are exact Decimal and zero when nothing matches.

    Args:
        rows: Ledger rows exposing remaining_fees and next_due_date.
        today: The calendar date "due today" refers to.

    Returns:
        FeeSummary for the snapshot.
    """
    total_due = sum((Decimal(row.remaining_fees) for row in rows), ZERO)
    due_today = sum(
        (Decimal(row.remaining_fees) for row in rows if row.next_due_date == today),
        ZERO,
    )
    return FeeSummary(
        total_students=len(rows),
        total_due_fee=total_due,
        total_due_today=due_today,
    )


def upcoming_dues(rows: Iterable, today: date) -> list:
    """Select rows due strictly after today.

    Rows without a due date never qualify.

    Returns:
        Matching rows ordered by next_due_date, then id.
    """
    upcoming = [
        row for row in rows
        if row.next_due_date is not None and row.next_due_date > today
    ]
    upcoming.sort(key=lambda row: (row.next_due_date, row.id))
    return upcoming
