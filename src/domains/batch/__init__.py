# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Batch domain package.

This package provides batch membership management including:
- Listing active students per batch
- Enrollment, transfer and removal
- Active student counts per batch and per enrollment date
"""

from src.domains.batch.service import BatchMembershipService

__all__ = [
    "BatchMembershipService",
]
