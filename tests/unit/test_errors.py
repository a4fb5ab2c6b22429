# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the record error taxonomy and its HTTP mapping."""

import pytest

from src.api.errors import status_for
from src.domains.errors import (
    AlreadyInBatchError,
    ConflictError,
    DuplicateUserError,
    ErrorKind,
    FeeStatusNotFoundError,
    InactiveOrMissingUserError,
    InternalError,
    MembershipNotFoundError,
    NoActiveStudentsError,
    NoRecordsForTestError,
    NotFoundError,
    OperationTimeoutError,
    RecordServiceError,
    ValidationError,
)


class TestErrorKinds:
    """Each error carries exactly one kind."""

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (ValidationError("bad id", field="batch_id"), ErrorKind.VALIDATION),
            (MembershipNotFoundError(7, 5), ErrorKind.NOT_FOUND),
            (NoActiveStudentsError("none"), ErrorKind.NOT_FOUND),
            (InactiveOrMissingUserError(7, exists=True), ErrorKind.NOT_FOUND),
            (FeeStatusNotFoundError(3), ErrorKind.NOT_FOUND),
            (NoRecordsForTestError(42), ErrorKind.NOT_FOUND),
            (AlreadyInBatchError(7, 5), ErrorKind.CONFLICT),
            (DuplicateUserError("User already exists"), ErrorKind.CONFLICT),
            (OperationTimeoutError("transfer", 1.5), ErrorKind.TIMEOUT),
            (InternalError(), ErrorKind.INTERNAL),
        ],
    )
    def test_kind(self, error: RecordServiceError, kind: ErrorKind) -> None:
        assert error.kind is kind
        assert isinstance(error, RecordServiceError)

    def test_hierarchy(self) -> None:
        assert issubclass(MembershipNotFoundError, NotFoundError)
        assert issubclass(InactiveOrMissingUserError, NotFoundError)
        assert issubclass(AlreadyInBatchError, ConflictError)


class TestErrorMessages:
    """Messages and serialized bodies."""

    def test_inactive_and_missing_messages_differ(self) -> None:
        inactive = InactiveOrMissingUserError(7, exists=True)
        missing = InactiveOrMissingUserError(7, exists=False)

        assert "not active" in inactive.message
        assert "does not exist" in missing.message
        assert inactive.exists is True
        assert missing.exists is False

    def test_to_dict(self) -> None:
        error = MembershipNotFoundError(7, 5)

        body = error.to_dict()

        assert body == {
            "error": "not_found",
            "type": "MembershipNotFoundError",
            "message": "No record found for user 7 in batch 5",
            "details": {"student_id": 7, "batch_id": 5},
        }

    def test_to_dict_without_details(self) -> None:
        body = InternalError().to_dict()

        assert body == {
            "error": "internal",
            "type": "InternalError",
            "message": "Internal server error",
        }

    def test_str_includes_details(self) -> None:
        error = ValidationError("fee_id must be a positive integer", field="fee_id")

        assert "fee_id must be a positive integer" in str(error)
        assert "fee_id" in str(error)


class TestStatusMapping:
    """Error kinds map to one HTTP status each."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ValidationError("bad"), 400),
            (NoActiveStudentsError("none"), 404),
            (DuplicateUserError("dup"), 409),
            (OperationTimeoutError("statistics", 2), 504),
            (InternalError(), 500),
        ],
    )
    def test_status_for(self, error: RecordServiceError, code: int) -> None:
        assert status_for(error) == code
