"""
Accept Invitation Use Case

Turns a valid invitation into a membership, creating the account when the
invitee has none, and signs the invitee in.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, OperationalError

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_password, validate_password
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    ChannelMembership,
    ScopeKind,
    TeamspaceMembership,
    TeamspaceRole,
    User,
)

from .dtos import AcceptInvitationResult
from .validate_invitation_use_case import (
    INVITATION_ALREADY_ACCEPTED,
    INVITATION_NOT_FOUND,
    check_invitation,
)

logger = logging.getLogger(__name__)


class AcceptInvitationUseCase:
    """
    Use case for accepting an invitation.

    Business Rules:
    - The token is re-validated inside the accepting transaction
    - An invitation for an existing account can only be accepted while
      signed in as that account; a mismatch counts as a failed attempt
    - New accounts need a password that passes the password policy
    - Channel invitations also grant teamspace viewer when the invitee has
      no teamspace membership yet
    - Exactly one of several concurrent accepts succeeds; the losers leave
      nothing behind
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        token: str,
        password: Optional[str] = None,
        name: Optional[str] = None,
        authenticated_user_id: Optional[UUID] = None,
    ) -> Result[AcceptInvitationResult]:
        """
        Execute accept invitation use case.

        Args:
            token: Invitation token from the link
            password: Password for a new account
            name: Display name for a new account
            authenticated_user_id: Signed-in user, if any

        Returns:
            Result with AcceptInvitationResult (including session cookie), or Error
        """
        async with self.uow:
            checked = await check_invitation(self.uow, token)
            if checked.is_err():
                await self.uow.commit()
                return checked

            invitation = checked.value

            teamspace = await self.uow.teamspaces.get_by_id(invitation.teamspace_id)
            channel = None
            if invitation.channel_id is not None:
                channel = await self.uow.channels.get_by_id(invitation.channel_id)
            if teamspace is None or (invitation.channel_id is not None and channel is None):
                return Return.err(Error(INVITATION_NOT_FOUND, "Invitation not found"))

            existing_user = await self.uow.users.get_by_email(invitation.email)

            if existing_user is not None:
                # Existing account: prove ownership by being signed in as it
                if authenticated_user_id != existing_user.id:
                    await self.uow.invitations.increment_attempts(invitation.id)
                    await self.uow.commit()
                    logger.warning(
                        f"Invitation {invitation.id} accept attempted without "
                        f"the invited account's session"
                    )
                    return Return.err(
                        Error(
                            "AUTHENTICATION_REQUIRED",
                            "Sign in as the invited account to accept this invitation",
                        )
                    )
            else:
                # New account: password policy before any write
                if not password:
                    return Return.err(
                        Error("PASSWORD_REQUIRED", "Password is required for new accounts")
                    )
                violations = validate_password(password)
                if violations:
                    return Return.err(Error("INVALID_PASSWORD", violations[0]))

            # Already a member of the target scope?
            if existing_user is not None:
                if channel is not None:
                    current = await self.uow.channel_memberships.get_by_user_and_channel(
                        existing_user.id, channel.id
                    )
                else:
                    current = await self.uow.teamspace_memberships.get_by_user_and_teamspace(
                        existing_user.id, teamspace.id
                    )
                if current is not None:
                    return Return.err(Error("ALREADY_MEMBER", "Already a member"))

            try:
                # Serialization point for concurrent accepts
                accepted = await self.uow.invitations.mark_accepted_if_pending(
                    invitation.id, datetime.utcnow()
                )
                if not accepted:
                    await self.uow.rollback()
                    return Return.err(
                        Error(INVITATION_ALREADY_ACCEPTED, "Invitation has already been accepted")
                    )

                is_new_user = existing_user is None
                if is_new_user:
                    user = await self.uow.users.create(
                        User(
                            email=invitation.email,
                            password_hash=hash_password(password),
                            name=name,
                        )
                    )
                else:
                    user = existing_user

                if invitation.scope_kind == ScopeKind.channel:
                    ts_membership = await self.uow.teamspace_memberships.get_by_user_and_teamspace(
                        user.id, teamspace.id
                    )
                    if ts_membership is None:
                        await self.uow.teamspace_memberships.create(
                            TeamspaceMembership(
                                user_id=user.id,
                                teamspace_id=teamspace.id,
                                role=TeamspaceRole.viewer,
                            )
                        )
                    await self.uow.channel_memberships.create(
                        ChannelMembership(
                            user_id=user.id,
                            channel_id=channel.id,
                            role=invitation.proposed_role,
                        )
                    )
                else:
                    await self.uow.teamspace_memberships.create(
                        TeamspaceMembership(
                            user_id=user.id,
                            teamspace_id=teamspace.id,
                            role=invitation.proposed_role,
                        )
                    )

                issued = await SessionManager(self.uow).issue(user.id)

                audit = AuditEvent(
                    teamspace_id=teamspace.id,
                    user_id=user.id,
                    action="invitation.accepted",
                    event_metadata={
                        "invitation_id": str(invitation.id),
                        "is_new_user": is_new_user,
                        "role": invitation.role,
                        "scope": invitation.scope_kind.value,
                    },
                )
                await self.uow.audit_events.create(audit)

                await self.uow.commit()
            except (IntegrityError, OperationalError) as exc:
                # A concurrent accept or signup won the race
                await self.uow.rollback()
                logger.warning(f"Invitation {invitation.id} accept lost a race: {exc}")
                return Return.err(
                    Error(INVITATION_ALREADY_ACCEPTED, "Invitation has already been accepted")
                )

            logger.info(f"Invitation {invitation.id} accepted by user {user.id}")

            return Return.ok(
                AcceptInvitationResult(
                    user_id=str(user.id),
                    email=user.email,
                    role=invitation.role,
                    scope=invitation.scope_kind.value,
                    teamspace_slug=teamspace.slug,
                    channel_slug=channel.slug if channel else None,
                    is_new_user=is_new_user,
                    session_token=issued.token,
                    session_cookie=issued.cookie,
                )
            )
