# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fee domain package.

This package provides the fee ledger including:
- Ledger CRUD with derived remaining amounts
- Payments
- Summary and upcoming dues aggregates
"""

from src.domains.fee.aggregation import FeeSummary, summarize, upcoming_dues
from src.domains.fee.service import FeeLedgerService

__all__ = [
    "FeeLedgerService",
    "FeeSummary",
    "summarize",
    "upcoming_dues",
]
