from uuid import uuid4

import pytest

from src.app.services.passwords import hash_password
from src.app.services.session_manager import hash_session_token
from src.app.use_cases.auth import LoginUseCase, LogoutUseCase
from src.domain.entities import User


@pytest.fixture
def user():
    return User(
        id=uuid4(),
        email="owner@example.com",
        password_hash=hash_password("correct horse battery"),
        name="Owner",
    )


@pytest.mark.asyncio
async def test_successful_login(mock_uow, user):
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow).execute("Owner@Example.com", "correct horse battery")

    assert result.is_ok()
    assert result.value.user.email == "owner@example.com"
    assert result.value.session_cookie.startswith(f"session={result.value.session_token};")
    mock_uow.users.get_by_email.assert_called_once_with("owner@example.com")
    mock_uow.sessions.create.assert_called_once()
    assert user.last_login_at is not None
    assert mock_uow.audit_events.create.call_args.args[0].action == "auth.login"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_look_the_same(mock_uow, user):
    mock_uow.users.get_by_email.return_value = user
    wrong_password = await LoginUseCase(mock_uow).execute("owner@example.com", "nope nope nope")

    mock_uow.users.get_by_email.return_value = None
    unknown_email = await LoginUseCase(mock_uow).execute("ghost@example.com", "nope nope nope")

    assert wrong_password.error == unknown_email.error
    assert wrong_password.error.message == "Invalid email or password."
    mock_uow.sessions.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_logout_deletes_session(mock_uow):
    result = await LogoutUseCase(mock_uow).execute("some-token")

    assert result.is_ok()
    assert "max-age=0" in result.value.session_cookie
    mock_uow.sessions.delete_by_id.assert_called_once_with(hash_session_token("some-token"))
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_without_session(mock_uow):
    result = await LogoutUseCase(mock_uow).execute(None)

    assert result.is_ok()
    mock_uow.sessions.delete_by_id.assert_not_called()
