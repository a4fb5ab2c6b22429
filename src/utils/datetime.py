# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the student records engine.

Design Decisions:
-----------------
1. Timestamps (created_at / updated_at) are stored in UTC
2. Python datetimes handed to the rest of the code are timezone-aware
3. Calendar dates on the fee ledger (due dates, admission dates) are
   compared against the server's local calendar date

Usage:
------
    from src.utils.datetime import utc_now, local_today

    # For SQLAlchemy model defaults
    created_at = mapped_column(DateTime(timezone=True), default=utc_now)

    # For "due today" style comparisons
    today = local_today()
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Get the current time in the server's local timezone.

    Returns:
        Timezone-aware datetime in the local timezone.
    """
    return datetime.now().astimezone()


def local_today() -> date:
    """Get the server's local calendar date.

    Returns:
        Today's date in the local timezone.
    """
    return local_now().date()


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    # Already aware - convert to UTC
    return dt.astimezone(timezone.utc)
