# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory domain package.

This package provides the user directory collaborator:
- DirectoryGateway: capability consumed by the record domains
- SqlDirectoryGateway: users-table implementation
- UserDirectoryService: plain read/write entry points
"""

from src.domains.directory.gateway import (
    DirectoryGateway,
    SqlDirectoryGateway,
    UserRecord,
)
from src.domains.directory.service import UserDirectoryService

__all__ = [
    "DirectoryGateway",
    "SqlDirectoryGateway",
    "UserRecord",
    "UserDirectoryService",
]
