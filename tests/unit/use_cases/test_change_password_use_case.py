from uuid import uuid4

import pytest

from src.app.services.passwords import hash_password, verify_password
from src.app.services.session_manager import hash_session_token
from src.app.use_cases.auth import ChangePasswordUseCase, GetCurrentUserUseCase
from src.domain.entities import Teamspace, TeamspaceMembership, TeamspaceRole, User


@pytest.fixture
def user():
    return User(
        id=uuid4(),
        email="owner@example.com",
        password_hash=hash_password("correct horse battery"),
    )


@pytest.mark.asyncio
async def test_change_password_revokes_other_sessions(mock_uow, user):
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.delete_all_except.return_value = 3

    result = await ChangePasswordUseCase(mock_uow).execute(
        user.id, "current-token", "correct horse battery", "a brand new passphrase"
    )

    assert result.is_ok()
    assert result.value.sessions_revoked == 3
    assert verify_password(user.password_hash, "a brand new passphrase")
    mock_uow.sessions.delete_all_except.assert_called_once_with(
        user.id, hash_session_token("current-token")
    )
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_wrong_current_password(mock_uow, user):
    mock_uow.users.get_by_id.return_value = user

    result = await ChangePasswordUseCase(mock_uow).execute(
        user.id, "current-token", "wrong", "a brand new passphrase"
    )

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.sessions.delete_all_except.assert_not_called()


@pytest.mark.asyncio
async def test_new_password_must_pass_policy(mock_uow, user):
    mock_uow.users.get_by_id.return_value = user

    result = await ChangePasswordUseCase(mock_uow).execute(
        user.id, "current-token", "correct horse battery", "12345678"
    )

    assert result.error.code == "INVALID_PASSWORD"
    assert verify_password(user.password_hash, "correct horse battery")


@pytest.mark.asyncio
async def test_current_user_lists_teamspaces(mock_uow, user):
    teamspace = Teamspace(id=uuid4(), name="Acme", slug="acme")
    mock_uow.users.get_by_id.return_value = user
    mock_uow.teamspace_memberships.get_by_user_id.return_value = [
        TeamspaceMembership(user_id=user.id, teamspace_id=teamspace.id, role=TeamspaceRole.admin)
    ]
    mock_uow.teamspaces.get_by_id.return_value = teamspace

    result = await GetCurrentUserUseCase(mock_uow).execute(user.id)

    assert result.is_ok()
    assert result.value.user.email == "owner@example.com"
    assert [(t.slug, t.role) for t in result.value.teamspaces] == [("acme", "admin")]
