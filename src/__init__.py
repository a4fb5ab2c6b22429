"""Student Records Engine.

Keeps student batch membership consistent, derives fee-due aggregates
from the fee ledger and computes rankings and statistics over test scores.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
