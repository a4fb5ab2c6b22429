# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request/response schemas for the record domains.

Modules:
    common: Shared building blocks (messages, error bodies).
    user: Directory entry schemas.
    batch: Batch membership schemas.
    fee: Fee ledger schemas.
    score: Test score schemas.
"""
