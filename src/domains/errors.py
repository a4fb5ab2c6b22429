# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by the record domains.

Every failure of a record operation surfaces as exactly one of these
exceptions. Each carries an ErrorKind so a transport layer can map the
outcome without knowing the concrete class:

- RecordServiceError: Base exception for all record errors
- ValidationError: Malformed or missing identifiers / amounts
- NotFoundError: Membership, record, fee row or user absent
- InactiveOrMissingUserError: User missing or not active
- ConflictError: Uniqueness violations
- OperationTimeoutError: Caller deadline exceeded
- InternalError: Storage failure (cause logged, never exposed)
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Outcome category of a failed operation."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class RecordServiceError(Exception):
    """Base exception for all record engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize record error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error bodies."""
        payload: dict[str, Any] = {
            "error": self.kind.value,
            "type": type(self).__name__,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(RecordServiceError):
    """Malformed or missing input. Never retried automatically."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class NotFoundError(RecordServiceError):
    """Requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class MembershipNotFoundError(NotFoundError):
    """No membership row for the (student, batch) pair."""

    def __init__(self, student_id: int, batch_id: int):
        super().__init__(
            f"No record found for user {student_id} in batch {batch_id}",
            {"student_id": student_id, "batch_id": batch_id},
        )


class NoActiveStudentsError(NotFoundError):
    """A listing or search matched no active students."""


class UserNotFoundError(NotFoundError):
    """User id unknown to the directory."""

    def __init__(self, user_id: int):
        super().__init__(f"User with id {user_id} not found", {"user_id": user_id})


class InactiveOrMissingUserError(NotFoundError):
    """User does not exist or is not active.

    Both cases block an operation identically; only the message differs.
    """

    def __init__(self, user_id: int, exists: bool = False):
        reason = "is not active" if exists else "does not exist"
        super().__init__(
            f"Active user with id {user_id} not found (user {reason})",
            {"user_id": user_id},
        )
        self.exists = exists


class FeeStatusNotFoundError(NotFoundError):
    """Fee ledger row id unknown."""

    def __init__(self, fee_id: int):
        super().__init__("Fee status not found", {"fee_id": fee_id})


class RecordNotFoundError(NotFoundError):
    """Test record id unknown, or student has no record in a test."""


class NoRecordsError(NotFoundError):
    """A test-record listing matched nothing."""


class NoRecordsForTestError(NotFoundError):
    """The test has no score records at all."""

    def __init__(self, test_id: int):
        super().__init__(f"No records found for test ID {test_id}.", {"test_id": test_id})


class ConflictError(RecordServiceError):
    """A uniqueness rule would be violated."""

    kind = ErrorKind.CONFLICT


class AlreadyInBatchError(ConflictError):
    """Student already has a current batch membership."""

    def __init__(self, student_id: int, batch_id: int):
        super().__init__(
            f"User {student_id} already belongs to batch {batch_id}",
            {"student_id": student_id, "batch_id": batch_id},
        )


class DuplicateUserError(ConflictError):
    """Email or phone number already registered."""


class OperationTimeoutError(RecordServiceError):
    """The caller's deadline expired before the operation finished."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, operation: str, timeout: float):
        super().__init__(
            f"Operation {operation} did not finish within {timeout:g}s",
            {"operation": operation, "timeout_seconds": timeout},
        )


class InternalError(RecordServiceError):
    """Storage-layer failure. The original cause is logged, not exposed."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
