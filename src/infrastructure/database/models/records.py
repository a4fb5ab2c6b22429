# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student record tables: batch membership, fee ledger and test scores.

None of these tables carry a uniqueness constraint on the student: the
one-current-batch and one-score-per-test rules are enforced by the
services that write them.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
)

MONEY = Numeric(12, 2)
MARKS = Numeric(7, 2)


class StudentBatch(Base, CreatedAtMixin):
    """Membership of a student in a batch (cohort)."""

    __tablename__ = "student_batches"
    __table_args__ = (
        Index("ix_student_batches_student_batch", "student_id", "batch_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    batch_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<StudentBatch student={self.student_id} batch={self.batch_id}>"


class FeeStatus(Base, TimestampMixin):
    """Per-student fee ledger row."""

    __tablename__ = "fee_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    admission_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_fees: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    fees_submitted: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    remaining_fees: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    next_due_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)

    def recompute_remaining(self) -> None:
        """Re-derive remaining_fees from total and submitted amounts."""
        self.remaining_fees = Decimal(self.total_fees) - Decimal(self.fees_submitted)

    def __repr__(self) -> str:
        return f"<FeeStatus {self.id} student={self.student_id} remaining={self.remaining_fees}>"


class StudentTestRecord(Base, TimestampMixin):
    """Marks obtained by a student in a test."""

    __tablename__ = "student_test_records"

    record_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    student_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    marks_obtained: Mapped[Decimal] = mapped_column(MARKS, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<StudentTestRecord {self.record_id} test={self.test_id} "
            f"student={self.student_id} marks={self.marks_obtained}>"
        )
