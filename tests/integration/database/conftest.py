# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Migrations run against a file-backed SQLite database so that separate
engines see the same schema.
"""

from pathlib import Path

import pytest


@pytest.fixture
def migration_db_url(tmp_path: Path) -> str:
    """Get a fresh records database URL for migration tests."""
    return f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"
