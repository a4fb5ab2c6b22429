# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial records database schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-01-15
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, with_updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]
    if with_updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now(),
            )
        )
    return columns


def upgrade() -> None:
    """Create records database tables."""
    # =========================================================================
    # USER DIRECTORY
    # =========================================================================

    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("role_id", sa.Integer, nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('active', 'inactive')",
            name="ck_users_valid_user_status",
        ),
        sa.UniqueConstraint("phone_number", name="uq_users_phone_number"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # =========================================================================
    # RECORD STREAMS
    # =========================================================================

    # No unique constraint on student_id: one current batch per student
    # is enforced by the membership service.
    op.create_table(
        "student_batches",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey(
                "users.user_id",
                ondelete="CASCADE",
                name="fk_student_batches_student_id_users",
            ),
            nullable=False,
        ),
        sa.Column("batch_id", sa.Integer, nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_student_batches_batch_id", "student_batches", ["batch_id"])
    op.create_index(
        "ix_student_batches_student_batch",
        "student_batches",
        ["student_id", "batch_id"],
    )

    op.create_table(
        "fee_statuses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer, nullable=False),
        sa.Column("admission_date", sa.Date, nullable=True),
        sa.Column("total_fees", sa.Numeric(12, 2), nullable=False),
        sa.Column("fees_submitted", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("remaining_fees", sa.Numeric(12, 2), nullable=False),
        sa.Column("next_due_date", sa.Date, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_fee_statuses_student_id", "fee_statuses", ["student_id"])
    op.create_index("ix_fee_statuses_next_due_date", "fee_statuses", ["next_due_date"])

    op.create_table(
        "student_test_records",
        sa.Column("record_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("test_id", sa.Integer, nullable=False),
        sa.Column("student_id", sa.Integer, nullable=False),
        sa.Column("marks_obtained", sa.Numeric(7, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_student_test_records_test_id", "student_test_records", ["test_id"])
    op.create_index("ix_student_test_records_student_id", "student_test_records", ["student_id"])


def downgrade() -> None:
    """Drop all records database tables."""
    # Drop in reverse order to handle foreign keys
    op.drop_table("student_test_records")
    op.drop_table("fee_statuses")
    op.drop_table("student_batches")
    op.drop_table("users")
