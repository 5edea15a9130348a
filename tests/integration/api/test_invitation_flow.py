import asyncio
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.invitations import AcceptInvitationUseCase
from src.domain.entities import (
    AuditEvent,
    ChannelMembership,
    Invitation,
    InvitationStatus,
    TeamspaceMembership,
    User,
)
from tests.utils.session import cookie_header, invite, join, owner_headers, session_token

NEW_PASSWORD = "a brand new passphrase"


@pytest.mark.asyncio
async def test_invite_new_user_end_to_end(client: AsyncClient, db_session):
    headers = await owner_headers(client)

    created = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "Editor@Example.com", "role": "editor"},
        headers=headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["email"] == "editor@example.com"
    assert body["scope"] == "teamspace"
    assert body["invitation_url"].startswith("http://test/invite/")
    token = body["invitation_url"].rsplit("/", 1)[-1]

    details = await client.get(f"/invitations/{token}")
    assert details.status_code == 200
    assert details.json()["teamspace_slug"] == "workspace"
    assert details.json()["role"] == "editor"
    assert details.json()["account_exists"] is False

    client.cookies.clear()
    accepted = await client.post(
        f"/invitations/{token}/accept", json={"password": NEW_PASSWORD, "name": "Ed"}
    )
    assert accepted.status_code == 200
    assert accepted.json()["is_new_user"] is True
    new_token = session_token(accepted)
    assert new_token

    me = await client.get("/auth/me", headers=cookie_header(new_token))
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "editor@example.com"
    assert me.json()["teamspaces"][0]["role"] == "editor"

    invitation = (await db_session.exec(select(Invitation))).one()
    assert invitation.status == InvitationStatus.accepted
    assert invitation.accepted_at is not None

    actions = [e.action for e in (await db_session.exec(select(AuditEvent))).all()]
    assert "invitation.created" in actions
    assert "invitation.accepted" in actions


@pytest.mark.asyncio
async def test_used_invitation_cannot_be_reused(client: AsyncClient, db_session):
    headers = await owner_headers(client)
    token = await invite(client, headers, "once@example.com", "viewer")

    client.cookies.clear()
    first = await client.post(f"/invitations/{token}/accept", json={"password": NEW_PASSWORD})
    assert first.status_code == 200

    client.cookies.clear()
    second = await client.post(f"/invitations/{token}/accept", json={"password": NEW_PASSWORD})
    assert second.status_code == 400
    assert second.json()["error"]["code"] == "INVALID_INVITATION"

    users = (await db_session.exec(select(User).where(User.email == "once@example.com"))).all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_unknown_and_malformed_tokens_look_the_same(client: AsyncClient):
    await owner_headers(client)

    malformed = await client.get("/invitations/not-a-token")
    unknown = await client.get(f"/invitations/{'a' * 64}")

    assert malformed.status_code == 400
    assert unknown.status_code == 400
    assert malformed.json() == unknown.json()


@pytest.mark.asyncio
async def test_expired_invitation_rejected(client: AsyncClient, db_session):
    headers = await owner_headers(client)
    token = await invite(client, headers, "late@example.com", "viewer")

    invitation = (await db_session.exec(select(Invitation))).one()
    invitation.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db_session.add(invitation)
    await db_session.commit()

    client.cookies.clear()
    response = await client.post(f"/invitations/{token}/accept", json={"password": NEW_PASSWORD})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INVITATION"
    memberships = (await db_session.exec(select(TeamspaceMembership))).all()
    assert len(memberships) == 1


@pytest.mark.asyncio
async def test_weak_password_does_not_consume_invitation(client: AsyncClient):
    headers = await owner_headers(client)
    token = await invite(client, headers, "weak@example.com", "viewer")

    client.cookies.clear()
    weak = await client.post(f"/invitations/{token}/accept", json={"password": "short"})
    assert weak.status_code == 400
    assert weak.json()["error"]["code"] == "INVALID_PASSWORD"

    missing = await client.post(f"/invitations/{token}/accept")
    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "PASSWORD_REQUIRED"

    too_long = await client.post(f"/invitations/{token}/accept", json={"password": "p" * 100})
    assert too_long.status_code == 400
    assert too_long.json()["error"]["code"] == "INVALID_PASSWORD"

    good = await client.post(f"/invitations/{token}/accept", json={"password": NEW_PASSWORD})
    assert good.status_code == 200


@pytest.mark.asyncio
async def test_existing_account_must_be_signed_in(client: AsyncClient, db_session):
    owner = await owner_headers(client)
    member = await join(client, owner, "member@example.com", "viewer")

    token = await invite(client, owner, "member@example.com", "editor", channel_slug="my-channel")

    client.cookies.clear()
    anonymous = await client.post(f"/invitations/{token}/accept")
    assert anonymous.status_code == 401
    assert anonymous.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"

    wrong_account = await client.post(f"/invitations/{token}/accept", headers=owner)
    assert wrong_account.status_code == 401

    accepted = await client.post(f"/invitations/{token}/accept", headers=member)
    assert accepted.status_code == 200
    assert accepted.json()["is_new_user"] is False
    assert accepted.json()["scope"] == "channel"

    access = await client.get("/t/workspace/c/my-channel/access", headers=member)
    assert access.json()["channel_role"] == "editor"
    assert access.json()["teamspace_role"] == "viewer"


@pytest.mark.asyncio
async def test_invitation_locks_after_failed_attempts(client: AsyncClient, db_session):
    owner = await owner_headers(client)
    member = await join(client, owner, "member@example.com", "viewer")
    token = await invite(client, owner, "member@example.com", "editor", channel_slug="my-channel")

    client.cookies.clear()
    for _ in range(3):
        response = await client.post(f"/invitations/{token}/accept")
        assert response.status_code == 401

    # The rightful owner is locked out too
    locked = await client.post(f"/invitations/{token}/accept", headers=member)
    assert locked.status_code == 400
    assert locked.json()["error"]["code"] == "INVALID_INVITATION"

    membership = (
        await db_session.exec(select(ChannelMembership).where(ChannelMembership.role == "editor"))
    ).first()
    assert membership is None


@pytest.mark.asyncio
async def test_channel_invitation_grants_teamspace_viewer(client: AsyncClient, db_session):
    owner = await owner_headers(client)

    newcomer = await join(
        client, owner, "guest@example.com", "editor", channel_slug="my-channel"
    )

    teamspace_access = await client.get("/t/workspace/access", headers=newcomer)
    assert teamspace_access.status_code == 200
    assert teamspace_access.json()["teamspace_role"] == "viewer"

    channel_access = await client.get("/c/my-channel/access", headers=newcomer)
    assert channel_access.status_code == 200
    assert channel_access.json()["role"] == "editor"


@pytest.mark.asyncio
async def test_create_invitation_rules(client: AsyncClient):
    owner = await owner_headers(client)
    editor = await join(client, owner, "editor@example.com", "editor")

    bad_role = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "x@example.com", "role": "admin", "channel_slug": "my-channel"},
        headers=owner,
    )
    assert bad_role.status_code == 400
    assert bad_role.json()["error"]["code"] == "INVALID_ROLE"

    # Editors cannot manage the teamspace; indistinguishable from no teamspace
    not_admin = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "x@example.com", "role": "viewer"},
        headers=editor,
    )
    assert not_admin.status_code == 404

    await invite(client, owner, "dup@example.com", "viewer")
    duplicate = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "dup@example.com", "role": "editor"},
        headers=owner,
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "INVITATION_ALREADY_PENDING"

    member = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "editor@example.com", "role": "viewer"},
        headers=owner,
    )
    assert member.status_code == 409
    assert member.json()["error"]["code"] == "ALREADY_MEMBER"

    anonymous = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "y@example.com", "role": "viewer"},
        headers={"Cookie": "session=bogus"},
    )
    assert anonymous.status_code == 401


@pytest.mark.asyncio
async def test_admin_cannot_invite_owner(client: AsyncClient):
    owner = await owner_headers(client)
    admin = await join(client, owner, "admin@example.com", "admin")

    response = await client.post(
        "/teamspaces/workspace/invitations",
        json={"email": "boss@example.com", "role": "owner"},
        headers=admin,
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ROLE_NOT_GRANTABLE"


@pytest.mark.asyncio
async def test_list_and_revoke_invitations(client: AsyncClient):
    owner = await owner_headers(client)
    token = await invite(client, owner, "pending@example.com", "viewer")
    await invite(client, owner, "other@example.com", "editor")

    listed = await client.get("/teamspaces/workspace/invitations", headers=owner)
    assert listed.status_code == 200
    assert listed.json()["total"] == 2
    pending = {i["email"]: i for i in listed.json()["invitations"]}
    assert "token" not in pending["pending@example.com"]

    invitation_id = pending["pending@example.com"]["invitation_id"]
    revoked = await client.delete(
        f"/teamspaces/workspace/invitations/{invitation_id}", headers=owner
    )
    assert revoked.status_code == 200
    assert revoked.json()["status"] == "revoked"

    again = await client.delete(
        f"/teamspaces/workspace/invitations/{invitation_id}", headers=owner
    )
    assert again.status_code == 409

    client.cookies.clear()
    accept = await client.post(f"/invitations/{token}/accept", json={"password": NEW_PASSWORD})
    assert accept.status_code == 400

    listed = await client.get("/teamspaces/workspace/invitations", headers=owner)
    assert listed.json()["total"] == 1


@pytest.mark.asyncio
async def test_concurrent_accepts_have_exactly_one_winner(client: AsyncClient, session_factory):
    """Two accepts of one invitation racing on separate connections"""
    owner = await owner_headers(client)
    token = await invite(client, owner, "racer@example.com", "editor")

    async def attempt():
        async with session_factory() as session:
            return await AcceptInvitationUseCase(SqlAlchemyUnitOfWork(session)).execute(
                token, password=NEW_PASSWORD
            )

    results = await asyncio.gather(attempt(), attempt())

    winners = [r for r in results if r.is_ok()]
    losers = [r for r in results if r.is_err()]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].error.code == "INVITATION_ALREADY_ACCEPTED"

    async with session_factory() as session:
        users = (await session.exec(select(User).where(User.email == "racer@example.com"))).all()
        assert len(users) == 1
        memberships = (
            await session.exec(
                select(TeamspaceMembership).where(TeamspaceMembership.user_id == users[0].id)
            )
        ).all()
        assert len(memberships) == 1
        invitation = (
            await session.exec(select(Invitation).where(Invitation.email == "racer@example.com"))
        ).one()
        assert invitation.status == InvitationStatus.accepted
