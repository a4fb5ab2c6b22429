# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for User directory service and gateway."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.domains.directory import DirectoryGateway, SqlDirectoryGateway, UserRecord
from src.domains.directory.service import UserDirectoryService
from src.domains.errors import DuplicateUserError, UserNotFoundError, ValidationError
from src.infrastructure.database.models import User
from src.models.user import UserCreateRequest, UserUpdateRequest


def scalar_result(item) -> MagicMock:
    """Build an execute() result whose scalar_one_or_none() returns item."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = item
    return result


@pytest.fixture
def sample_user():
    """Create a sample directory user model."""
    return User(
        user_id=1,
        name="Asha Rao",
        email="asha@school.example",
        phone_number="5550101",
        role_id=3,
        status="active",
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def user_service(mock_db):
    """Create directory service with mock database."""
    return UserDirectoryService(db=mock_db)


class TestRegisterUser:
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_duplicate_email(self, user_service, mock_db, sample_user):
        mock_db.execute.return_value = scalar_result(sample_user)

        with pytest.raises(DuplicateUserError, match="User already exists"):
            await user_service.register_user(
                UserCreateRequest(name="Other", email="asha@school.example", role_id=3)
            )

        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_awaited()
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_phone(self, user_service, mock_db, sample_user):
        mock_db.execute.return_value = scalar_result(sample_user)

        with pytest.raises(DuplicateUserError, match="Phone number"):
            await user_service.register_user(
                UserCreateRequest(
                    name="Other",
                    email="other@school.example",
                    phone_number="5550101",
                    role_id=3,
                )
            )


class TestUpdateUser:
    """Tests for updates and status changes."""

    @pytest.mark.asyncio
    async def test_get_missing_user(self, user_service, mock_db):
        mock_db.execute.return_value = scalar_result(None)

        with pytest.raises(UserNotFoundError):
            await user_service.get_user(99)

    @pytest.mark.asyncio
    async def test_update_rejects_cleared_name(self, user_service, mock_db, sample_user):
        mock_db.execute.return_value = scalar_result(sample_user)

        with pytest.raises(ValidationError):
            await user_service.update_user(1, UserUpdateRequest(name=None))

        assert sample_user.name == "Asha Rao"
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_set_status_missing_user_rolls_back(self, user_service, mock_db):
        mock_db.execute.return_value = scalar_result(None)

        with pytest.raises(UserNotFoundError):
            await user_service.set_status(99, "inactive")

        mock_db.commit.assert_not_awaited()
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_commits_once(self, user_service, mock_db, sample_user):
        mock_db.execute.side_effect = [scalar_result(sample_user), scalar_result(None)]

        result = await user_service.update_user(
            1, UserUpdateRequest(email="asha.rao@school.example")
        )

        assert result.email == "asha.rao@school.example"
        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_set_status(self, user_service, mock_db, sample_user):
        mock_db.execute.return_value = scalar_result(sample_user)

        result = await user_service.set_status(1, "inactive")

        assert result.status == "inactive"
        mock_db.commit.assert_awaited_once()


class TestGateway:
    """Tests for the directory capability."""

    def test_sql_gateway_satisfies_protocol(self, mock_db):
        assert isinstance(SqlDirectoryGateway(mock_db), DirectoryGateway)

    def test_fake_directory_satisfies_protocol(self, directory):
        assert isinstance(directory, DirectoryGateway)

    def test_user_record_from_model(self, sample_user):
        record = UserRecord.from_model(sample_user)

        assert record.user_id == 1
        assert record.is_active is True

    @pytest.mark.asyncio
    async def test_find_active_users_skips_query_for_no_ids(self, mock_db):
        gateway = SqlDirectoryGateway(mock_db)

        assert await gateway.find_active_users([]) == {}
        mock_db.execute.assert_not_awaited()
