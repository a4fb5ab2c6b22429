# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scores domain package.

This package provides test score management including:
- Score record creation and correction
- Deterministic ranking with positional or competition policy
- Per-test statistics
"""

from src.domains.scores.ranking import (
    COMPETITION,
    POSITIONAL,
    RankResult,
    ScoreStatistics,
    compute_statistics,
    deduplicate,
    rank_of,
)
from src.domains.scores.service import ScoreRankingService

__all__ = [
    "COMPETITION",
    "POSITIONAL",
    "RankResult",
    "ScoreRankingService",
    "ScoreStatistics",
    "compute_statistics",
    "deduplicate",
    "rank_of",
]
