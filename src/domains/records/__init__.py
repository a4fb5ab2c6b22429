# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Records domain package.

Provides RecordService, the facade composing the batch, fee, score and
directory components under one validation and deadline policy.
"""

from src.domains.records.facade import RecordService, validate_amount, validate_id

__all__ = [
    "RecordService",
    "validate_amount",
    "validate_id",
]
