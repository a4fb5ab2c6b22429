# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the student records engine.

This package contains domain services that encapsulate business logic.
Each domain module reads and writes the records database through an
AsyncSession and raises errors from src.domains.errors.

Domains:
    directory: User directory gateway and directory maintenance.
    batch: Batch membership listing, transfer and counts.
    fee: Fee ledger CRUD, payments and aggregates.
    scores: Test score records, ranking and statistics.
    records: Facade composing the domains under one deadline policy.
"""
