# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Records database migration revisions.

Modules named NNN_description are discovered by the runner and applied
in name order; each must name its predecessor in down_revision.
"""
