from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.app.services.setup_flag import SetupFlag, SetupFlagWriteError
from src.app.use_cases.setup import CompleteSetupUseCase, SetupCommand
from src.domain.entities import ChannelRole, TeamspaceRole


@pytest.fixture
def flag(tmp_path):
    return SetupFlag(str(tmp_path / "data"))


@pytest.fixture
def command():
    return SetupCommand(
        email="Owner@Example.com",
        password="correct horse battery",
        name="Owner",
        teamspace_name="Acme Studio",
        channel_name="Main Channel",
    )


@pytest.mark.asyncio
async def test_first_run_creates_owner_workspace_and_channel(mock_uow, flag, command):
    # Arrange
    mock_uow.users.count.side_effect = [0, 1]

    # Act
    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    # Assert
    assert result.is_ok()
    value = result.value
    assert value.email == "owner@example.com"
    assert value.teamspace_slug == "workspace"
    assert value.channel_slug == "main-channel"
    assert value.session_cookie.startswith("session=")

    ts_membership = mock_uow.teamspace_memberships.create.call_args.args[0]
    assert ts_membership.role == TeamspaceRole.owner
    ch_membership = mock_uow.channel_memberships.create.call_args.args[0]
    assert ch_membership.role == ChannelRole.owner
    assert mock_uow.audit_events.create.call_args.args[0].action == "setup.completed"
    mock_uow.commit.assert_called_once()
    assert flag.is_set()


@pytest.mark.asyncio
async def test_multi_tenant_slugifies_teamspace_name(mock_uow, flag, command, monkeypatch, test_config):
    monkeypatch.setattr(test_config, "MODE", "multi-tenant")
    mock_uow.users.count.side_effect = [0, 1]

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.value.teamspace_slug == "acme-studio"


@pytest.mark.asyncio
async def test_refused_once_flag_exists(mock_uow, flag, command):
    flag.mark_complete()

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.error.code == "SETUP_ALREADY_COMPLETED"
    mock_uow.users.count.assert_not_called()


@pytest.mark.asyncio
async def test_refused_with_short_session_secret(mock_uow, flag, command, monkeypatch, test_config):
    monkeypatch.setattr(test_config, "SESSION_SECRET", "too-short")

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.error.code == "SETUP_REQUIREMENTS_NOT_MET"
    assert "SESSION_SECRET" in result.error.message
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_refused_with_weak_password(mock_uow, flag, command):
    command.password = "password"

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.error.code == "INVALID_PASSWORD"
    assert not flag.is_set()


@pytest.mark.asyncio
async def test_refused_when_users_exist_without_flag(mock_uow, flag, command):
    """A lost flag does not reopen setup"""
    mock_uow.users.count.return_value = 1

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.error.code == "USERS_ALREADY_EXIST"
    mock_uow.users.create.assert_not_called()
    assert not flag.is_set()


@pytest.mark.asyncio
async def test_concurrent_insert_detected(mock_uow, flag, command):
    mock_uow.users.count.side_effect = [0, 2]

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.error.code == "USERS_ALREADY_EXIST"
    mock_uow.rollback.assert_called_once()
    mock_uow.commit.assert_not_called()
    assert not flag.is_set()


@pytest.mark.asyncio
async def test_integrity_error_rolls_back(mock_uow, flag, command):
    mock_uow.users.count.return_value = 0
    mock_uow.users.create.side_effect = IntegrityError("insert", {}, Exception("duplicate"))

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.error.code == "USERS_ALREADY_EXIST"
    mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
async def test_flag_write_failure_fails_setup(mock_uow, command):
    mock_uow.users.count.side_effect = [0, 1]
    flag = MagicMock(spec=SetupFlag)
    flag.path = "/unwritable/.setup-complete"
    flag.is_set.return_value = False
    flag.mark_complete.side_effect = SetupFlagWriteError("Permission denied")

    result = await CompleteSetupUseCase(mock_uow, flag).execute(command)

    assert result.is_err()
    assert result.error.code == "SETUP_FLAG_WRITE_FAILED"
    assert "/unwritable/.setup-complete" in result.error.message
