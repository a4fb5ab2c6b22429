# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    batches: Batch membership, transfer and count endpoints.
    fees: Fee ledger, payments and aggregate endpoints.
    scores: Test score, rank and statistics endpoints.
    users: User directory maintenance endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import batches, fees, scores, users

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(batches.router, prefix="/student-batches", tags=["Student Batches"])
router.include_router(fees.router, prefix="/fee-status", tags=["Fee Status"])
router.include_router(scores.router, prefix="/test-records", tags=["Test Records"])
router.include_router(users.router, prefix="/users", tags=["Users"])
