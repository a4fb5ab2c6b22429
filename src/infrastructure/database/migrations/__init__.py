# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Alembic operations for the records database, applied programmatically by
the runner module (no alembic.ini / CLI environment is required).
"""
