# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared schema building blocks."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

PositiveId = Annotated[int, Field(gt=0, description="Positive integer identifier")]

StatusEnum = Literal["active", "inactive"]


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """Error body returned by the API for every failed operation."""

    error: str = Field(description="Error kind (validation, not_found, ...)")
    type: str = Field(description="Concrete error class")
    message: str = Field(description="Human-readable description")
    details: dict[str, Any] | None = Field(default=None, description="Extra context")
