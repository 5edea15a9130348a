import asyncio
import os

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.setup_flag import SetupFlag
from src.app.use_cases.setup import CompleteSetupUseCase, SetupCommand
from src.domain.entities import (
    AuditEvent,
    Channel,
    ChannelMembership,
    Teamspace,
    TeamspaceMembership,
    User,
)
from tests.utils.session import OWNER_PASSWORD, cookie_header, run_setup, session_token


@pytest.mark.asyncio
async def test_setup_status_before_and_after(client: AsyncClient):
    before = await client.get("/setup/status")
    assert before.status_code == 200
    assert before.json()["setup_complete"] is False
    assert before.json()["mode"] == "single-tenant"
    assert before.json()["missing_requirements"] == []

    assert (await run_setup(client)).status_code == 201

    after = await client.get("/setup/status")
    assert after.json()["setup_complete"] is True
    assert after.json()["completed_at"] is not None


@pytest.mark.asyncio
async def test_first_run_setup(client: AsyncClient, db_session, test_config):
    """Creates owner, reserved workspace, default channel and signs the owner in"""
    response = await run_setup(client, channel_name="Launch Plans")

    assert response.status_code == 201
    data = response.json()
    assert data["teamspace_slug"] == "workspace"
    assert data["channel_slug"] == "launch-plans"
    assert "session_token" not in data

    set_cookie = response.headers["set-cookie"]
    assert "httponly" in set_cookie.lower()
    assert "samesite=lax" in set_cookie.lower()

    user = (await db_session.exec(select(User))).one()
    assert user.email == "owner@example.com"
    assert user.password_hash != OWNER_PASSWORD

    teamspace = (await db_session.exec(select(Teamspace))).one()
    channel = (await db_session.exec(select(Channel))).one()
    assert channel.teamspace_id == teamspace.id

    ts_membership = (await db_session.exec(select(TeamspaceMembership))).one()
    assert ts_membership.role.value == "owner"
    ch_membership = (await db_session.exec(select(ChannelMembership))).one()
    assert ch_membership.role.value == "owner"

    audit = (
        await db_session.exec(select(AuditEvent).where(AuditEvent.action == "setup.completed"))
    ).one()
    assert audit.user_id == user.id

    assert SetupFlag(test_config.DATA_DIR).is_set()

    me = await client.get("/auth/me", headers=cookie_header(session_token(response)))
    assert me.status_code == 200
    assert me.json()["teamspaces"][0]["role"] == "owner"


@pytest.mark.asyncio
async def test_second_setup_is_refused(client: AsyncClient, db_session):
    assert (await run_setup(client)).status_code == 201

    second = await run_setup(client, email="intruder@example.com")

    assert second.status_code == 403
    assert second.json()["error"]["code"] == "SETUP_ALREADY_COMPLETED"
    users = (await db_session.exec(select(User))).all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_setup_refused_when_users_exist_but_flag_missing(client: AsyncClient, test_config):
    assert (await run_setup(client)).status_code == 201

    # Simulate a lost data directory
    flag = SetupFlag(test_config.DATA_DIR)
    os.remove(flag.path)

    response = await run_setup(client, email="intruder@example.com")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USERS_ALREADY_EXIST"


@pytest.mark.asyncio
async def test_setup_requirements_not_met(client: AsyncClient, monkeypatch, test_config):
    monkeypatch.setattr(test_config, "SESSION_SECRET", "short")

    response = await run_setup(client)

    assert response.status_code == 412
    assert response.json()["error"]["code"] == "SETUP_REQUIREMENTS_NOT_MET"

    status = await client.get("/setup/status")
    assert status.json()["missing_requirements"]


@pytest.mark.asyncio
async def test_setup_rejects_weak_password(client: AsyncClient, test_config):
    response = await run_setup(client, password="password123")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"
    assert not SetupFlag(test_config.DATA_DIR).is_set()


@pytest.mark.asyncio
async def test_flag_write_failure_reported_to_operator(client: AsyncClient, monkeypatch, test_config, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.setattr(test_config, "DATA_DIR", str(blocker))

    response = await run_setup(client)

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "SETUP_FLAG_WRITE_FAILED"
    assert str(blocker) in error["message"]


@pytest.mark.asyncio
async def test_concurrent_setup_has_exactly_one_winner(session_factory, test_config):
    """Two first-run requests racing on separate connections"""
    flag = SetupFlag(test_config.DATA_DIR)

    async def attempt(email):
        async with session_factory() as session:
            command = SetupCommand(email=email, password=OWNER_PASSWORD)
            return await CompleteSetupUseCase(SqlAlchemyUnitOfWork(session), flag).execute(
                command
            )

    results = await asyncio.gather(attempt("first@example.com"), attempt("second@example.com"))

    winners = [r for r in results if r.is_ok()]
    losers = [r for r in results if r.is_err()]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].error.code in ("USERS_ALREADY_EXIST", "SETUP_ALREADY_COMPLETED")
    assert flag.is_set()

    async with session_factory() as session:
        users = (await session.exec(select(User))).all()
        teamspaces = (await session.exec(select(Teamspace))).all()
    assert len(users) == 1
    assert len(teamspaces) == 1


@pytest.mark.asyncio
async def test_setup_rejects_password_longer_than_72_bytes(client: AsyncClient, db_session):
    response = await run_setup(client, password="correct horse battery staple " * 4)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"
    assert (await db_session.exec(select(User))).all() == []
