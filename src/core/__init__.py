# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the student records engine.

This package contains shared core building blocks:
- config: Application configuration and settings
"""
