# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record service facade.

RecordService is the single entry point callers use for batch, fee,
score and directory operations. Every operation goes through the same
policy:

- identifiers must be positive integers (numeric strings are accepted)
- the call runs under a deadline; expiry raises OperationTimeoutError
- any failure rolls the session back before the error propagates
- storage failures surface as InternalError; the cause is only logged

Example:
    async with get_session() as session:
        records = RecordService.from_settings(session, get_settings())
        await records.transfer(student_id=7, old_batch_id=5, new_batch_id=9)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.batch.service import BatchMembershipService
from src.domains.directory.gateway import DirectoryGateway, SqlDirectoryGateway
from src.domains.directory.service import UserDirectoryService
from src.domains.errors import (
    InternalError,
    OperationTimeoutError,
    RecordServiceError,
    ValidationError,
)
from src.domains.fee.service import FeeLedgerService
from src.domains.scores.ranking import POSITIONAL, RankingPolicy
from src.domains.scores.service import ScoreRankingService
from src.infrastructure.database.models.directory import USER_STATUSES
from src.models.batch import (
    BatchCountListResponse,
    DateCount,
    MembershipResponse,
)
from src.models.fee import (
    FeeStatusCreateRequest,
    FeeStatusResponse,
    FeeStatusUpdateRequest,
    FeeSummaryResponse,
)
from src.models.score import (
    RankResponse,
    ScoreCreateRequest,
    ScoreRecordResponse,
    ScoreStatisticsResponse,
    ScoreUpdateRequest,
)
from src.models.user import UserCreateRequest, UserResponse, UserUpdateRequest

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 10.0


def validate_id(value: Any, field: str) -> int:
    """Coerce an identifier to a positive int.

    Accepts ints and strings of decimal digits.

    Raises:
        ValidationError: If the value is missing, malformed or not positive.
    """
    if value is None:
        raise ValidationError(f"{field} is required", field=field)

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field=field)

    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise ValidationError(f"{field} must be an integer", field=field)

    if number <= 0:
        raise ValidationError(f"{field} must be a positive integer", field=field)

    return number


def validate_amount(value: Any, field: str = "amount") -> Decimal:
    """Coerce a monetary amount to a positive Decimal.

    Raises:
        ValidationError: If the value is not a finite positive number.
    """
    if isinstance(value, (bool, float)):
        raise ValidationError(f"{field} must be a decimal value", field=field)

    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} must be a decimal value", field=field) from e

    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be a positive amount", field=field)

    return amount


class RecordService:
    """CRUD and analytics surface over the record domains.

    Attributes:
        db: Session shared by every component.
        timeout: Default deadline in seconds.
        batches: Batch membership component.
        fees: Fee ledger component.
        scores: Test score component.
        users: Directory maintenance component.
    """

    def __init__(
        self,
        db: AsyncSession,
        directory: DirectoryGateway | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        ranking_policy: RankingPolicy = POSITIONAL,
        enforce_single_membership: bool = False,
    ) -> None:
        """Initialize the facade.

        Args:
            db: Async database session.
            directory: Directory gateway. Defaults to the users table.
            timeout: Default deadline in seconds.
            ranking_policy: "positional" or "competition".
            enforce_single_membership: Reject enrolling a student twice.
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.db = db
        self.timeout = timeout
        self.batches = BatchMembershipService(
            db,
            directory or SqlDirectoryGateway(db),
            enforce_single_membership=enforce_single_membership,
        )
        self.fees = FeeLedgerService(db)
        self.scores = ScoreRankingService(db, ranking_policy)
        self.users = UserDirectoryService(db)

    @classmethod
    def from_settings(
        cls,
        db: AsyncSession,
        settings: Settings,
        directory: DirectoryGateway | None = None,
    ) -> RecordService:
        """Build a facade configured from application settings."""
        return cls(
            db,
            directory,
            timeout=settings.records.operation_timeout_seconds,
            ranking_policy=settings.records.ranking_policy,
            enforce_single_membership=settings.records.enforce_single_membership,
        )

    async def _run(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        timeout: float | None = None,
    ) -> T:
        """Run one operation under the deadline and failure policy."""
        limit = self.timeout if timeout is None else timeout
        if limit <= 0:
            raise ValidationError("timeout must be positive", field="timeout")

        try:
            async with asyncio.timeout(limit):
                return await call()
        except TimeoutError as e:
            await self.db.rollback()
            logger.warning("Operation %s exceeded its %ss deadline", operation, limit)
            raise OperationTimeoutError(operation, limit) from e
        except RecordServiceError as e:
            await self.db.rollback()
            logger.info("Operation %s failed: %s", operation, e.message)
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Storage failure during %s", operation)
            raise InternalError() from e

    # ------------------------------------------------------------------
    # Batch membership
    # ------------------------------------------------------------------

    async def list_students(
        self,
        batch_id: Any = None,
        *,
        timeout: float | None = None,
    ) -> list[MembershipResponse]:
        """List active students, optionally within one batch."""
        batch = None if batch_id is None else validate_id(batch_id, "batch_id")
        return await self._run(
            "list_students", lambda: self.batches.list_students(batch), timeout
        )

    async def add_membership(
        self,
        student_id: Any,
        batch_id: Any,
        *,
        timeout: float | None = None,
    ) -> MembershipResponse:
        """Enroll an active student in a batch."""
        student = validate_id(student_id, "student_id")
        batch = validate_id(batch_id, "batch_id")
        return await self._run(
            "add_membership",
            lambda: self.batches.add_membership(student, batch),
            timeout,
        )

    async def transfer(
        self,
        student_id: Any,
        old_batch_id: Any,
        new_batch_id: Any,
        *,
        timeout: float | None = None,
    ) -> MembershipResponse:
        """Move a student between batches atomically."""
        student = validate_id(student_id, "student_id")
        old_batch = validate_id(old_batch_id, "old_batch_id")
        new_batch = validate_id(new_batch_id, "new_batch_id")
        return await self._run(
            "transfer",
            lambda: self.batches.transfer(student, old_batch, new_batch),
            timeout,
        )

    async def remove_membership(
        self,
        student_id: Any,
        batch_id: Any,
        *,
        timeout: float | None = None,
    ) -> int:
        """Remove a student from a batch."""
        student = validate_id(student_id, "student_id")
        batch = validate_id(batch_id, "batch_id")
        return await self._run(
            "remove_membership",
            lambda: self.batches.remove_membership(student, batch),
            timeout,
        )

    async def search_by_student(
        self,
        student_id: Any,
        *,
        timeout: float | None = None,
    ) -> list[MembershipResponse]:
        """Memberships of an active student with display fields."""
        student = validate_id(student_id, "student_id")
        return await self._run(
            "search_by_student",
            lambda: self.batches.search_by_student(student),
            timeout,
        )

    async def count_by_batch(
        self,
        batch_id: Any = None,
        *,
        timeout: float | None = None,
    ) -> BatchCountListResponse:
        """Active student counts for one batch or every batch."""
        batch = None if batch_id is None else validate_id(batch_id, "batch_id")
        return await self._run(
            "count_by_batch", lambda: self.batches.count_by_batch(batch), timeout
        )

    async def count_by_date(
        self,
        batch_id: Any,
        *,
        timeout: float | None = None,
    ) -> list[DateCount]:
        """Active memberships of a batch per enrollment date."""
        batch = validate_id(batch_id, "batch_id")
        return await self._run(
            "count_by_date", lambda: self.batches.count_by_date(batch), timeout
        )

    # ------------------------------------------------------------------
    # Fee ledger
    # ------------------------------------------------------------------

    async def list_fees(self, *, timeout: float | None = None) -> list[FeeStatusResponse]:
        return await self._run("list_fees", self.fees.list_fees, timeout)

    async def get_fee(self, fee_id: Any, *, timeout: float | None = None) -> FeeStatusResponse:
        fee = validate_id(fee_id, "fee_id")
        return await self._run("get_fee", lambda: self.fees.get_fee(fee), timeout)

    async def create_fee(
        self,
        request: FeeStatusCreateRequest,
        *,
        timeout: float | None = None,
    ) -> FeeStatusResponse:
        return await self._run("create_fee", lambda: self.fees.create_fee(request), timeout)

    async def update_fee(
        self,
        fee_id: Any,
        request: FeeStatusUpdateRequest,
        *,
        timeout: float | None = None,
    ) -> FeeStatusResponse:
        fee = validate_id(fee_id, "fee_id")
        return await self._run(
            "update_fee", lambda: self.fees.update_fee(fee, request), timeout
        )

    async def delete_fee(self, fee_id: Any, *, timeout: float | None = None) -> None:
        fee = validate_id(fee_id, "fee_id")
        await self._run("delete_fee", lambda: self.fees.delete_fee(fee), timeout)

    async def record_payment(
        self,
        fee_id: Any,
        amount: Any,
        next_due_date: date | None = None,
        *,
        timeout: float | None = None,
    ) -> FeeStatusResponse:
        """Add a payment to a ledger row."""
        fee = validate_id(fee_id, "fee_id")
        value = validate_amount(amount)
        return await self._run(
            "record_payment",
            lambda: self.fees.record_payment(fee, value, next_due_date),
            timeout,
        )

    async def fee_summary(self, *, timeout: float | None = None) -> FeeSummaryResponse:
        """Ledger-wide totals."""
        return await self._run("fee_summary", self.fees.summary, timeout)

    async def upcoming_dues(self, *, timeout: float | None = None) -> list[FeeStatusResponse]:
        """Rows due after today, soonest first."""
        return await self._run("upcoming_dues", self.fees.upcoming_dues, timeout)

    # ------------------------------------------------------------------
    # Test scores
    # ------------------------------------------------------------------

    async def record_score(
        self,
        request: ScoreCreateRequest,
        *,
        timeout: float | None = None,
    ) -> ScoreRecordResponse:
        return await self._run(
            "record_score", lambda: self.scores.record_score(request), timeout
        )

    async def update_score(
        self,
        record_id: Any,
        request: ScoreUpdateRequest,
        *,
        timeout: float | None = None,
    ) -> ScoreRecordResponse:
        record = validate_id(record_id, "record_id")
        return await self._run(
            "update_score", lambda: self.scores.update_score(record, request), timeout
        )

    async def list_scores(self, *, timeout: float | None = None) -> list[ScoreRecordResponse]:
        return await self._run("list_scores", self.scores.list_records, timeout)

    async def list_scores_by_test(
        self,
        test_id: Any,
        *,
        timeout: float | None = None,
    ) -> list[ScoreRecordResponse]:
        test = validate_id(test_id, "test_id")
        return await self._run(
            "list_scores_by_test", lambda: self.scores.list_by_test(test), timeout
        )

    async def list_scores_by_student(
        self,
        student_id: Any,
        *,
        timeout: float | None = None,
    ) -> list[ScoreRecordResponse]:
        student = validate_id(student_id, "student_id")
        return await self._run(
            "list_scores_by_student",
            lambda: self.scores.list_by_student(student),
            timeout,
        )

    async def rank(
        self,
        test_id: Any,
        student_id: Any,
        *,
        timeout: float | None = None,
    ) -> RankResponse:
        """Rank of a student within a test."""
        test = validate_id(test_id, "test_id")
        student = validate_id(student_id, "student_id")
        return await self._run("rank", lambda: self.scores.rank(test, student), timeout)

    async def statistics(
        self,
        test_id: Any,
        *,
        timeout: float | None = None,
    ) -> ScoreStatisticsResponse:
        """Highest, lowest and average marks of a test."""
        test = validate_id(test_id, "test_id")
        return await self._run("statistics", lambda: self.scores.statistics(test), timeout)

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    async def register_user(
        self,
        request: UserCreateRequest,
        *,
        timeout: float | None = None,
    ) -> UserResponse:
        return await self._run(
            "register_user", lambda: self.users.register_user(request), timeout
        )

    async def get_user(self, user_id: Any, *, timeout: float | None = None) -> UserResponse:
        user = validate_id(user_id, "user_id")
        return await self._run("get_user", lambda: self.users.get_user(user), timeout)

    async def update_user(
        self,
        user_id: Any,
        request: UserUpdateRequest,
        *,
        timeout: float | None = None,
    ) -> UserResponse:
        user = validate_id(user_id, "user_id")
        return await self._run(
            "update_user", lambda: self.users.update_user(user, request), timeout
        )

    async def set_user_status(
        self,
        user_id: Any,
        status: str,
        *,
        timeout: float | None = None,
    ) -> UserResponse:
        user = validate_id(user_id, "user_id")
        if status not in USER_STATUSES:
            raise ValidationError(
                f"status must be one of {', '.join(USER_STATUSES)}", field="status"
            )
        return await self._run(
            "set_user_status", lambda: self.users.set_status(user, status), timeout
        )
