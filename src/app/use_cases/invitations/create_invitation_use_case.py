"""
Create Invitation Use Case

Invites an email address into a teamspace or one of its channels.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.access_resolver import EffectiveAccessResolver
from src.app.services.invitation_tokens import (
    calculate_invitation_expiry,
    generate_invitation_token,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    ChannelRole,
    Invitation,
    ScopeKind,
    TeamspaceRole,
)
from src.domain.roles import coerce_role, satisfies

from .dtos import CreateInvitationResponse

logger = logging.getLogger(__name__)


class CreateInvitationUseCase:
    """
    Use case for inviting someone to a teamspace or channel.

    Business Rules:
    - Teamspace invitations require teamspace admin or owner
    - Channel invitations require an effective channel owner
    - The proposed role must exist at the target scope kind
    - Nobody can invite at a role above their own
    - No invitation for someone who is already a member of the scope
    - At most one pending invitation per scope and email
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        inviter_id: UUID,
        teamspace_slug: str,
        email: str,
        role: str,
        channel_slug: Optional[str] = None,
    ) -> Result[CreateInvitationResponse]:
        """
        Execute create invitation use case.

        Args:
            inviter_id: Authenticated user sending the invitation
            teamspace_slug: Teamspace the invitation belongs to
            email: Invitee email
            role: Proposed role at the target scope
            channel_slug: Target channel, None for a teamspace invitation

        Returns:
            Result with CreateInvitationResponse (including the link), or Error
        """
        scope_kind = ScopeKind.channel if channel_slug else ScopeKind.teamspace
        email = email.strip().lower()

        # Role must belong to the scope kind ("admin" is not a channel role)
        try:
            proposed_role = coerce_role(scope_kind, role)
        except ValueError:
            return Return.err(
                Error("INVALID_ROLE", f"'{role}' is not a {scope_kind.value} role")
            )

        async with self.uow:
            # Inviter authorization
            required = (
                ChannelRole.owner if scope_kind == ScopeKind.channel else TeamspaceRole.admin
            )
            access = await EffectiveAccessResolver(self.uow).require(
                inviter_id, required, teamspace_slug, channel_slug
            )
            if access.is_err():
                return access

            effective = access.value
            if not satisfies(effective.role, proposed_role, scope_kind):
                return Return.err(
                    Error("ROLE_NOT_GRANTABLE", "Cannot invite at a role above your own")
                )

            teamspace = effective.teamspace
            channel = effective.channel

            # Already a member of the scope?
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user is not None:
                if channel is not None:
                    membership = await self.uow.channel_memberships.get_by_user_and_channel(
                        existing_user.id, channel.id
                    )
                else:
                    membership = await self.uow.teamspace_memberships.get_by_user_and_teamspace(
                        existing_user.id, teamspace.id
                    )
                if membership is not None:
                    return Return.err(
                        Error("ALREADY_MEMBER", "User is already a member")
                    )

            # One pending invitation per scope and email
            pending = await self.uow.invitations.get_pending_for_email(
                teamspace.id,
                channel.id if channel else None,
                email,
                now=datetime.utcnow(),
            )
            if pending is not None:
                return Return.err(
                    Error(
                        "INVITATION_ALREADY_PENDING",
                        "A pending invitation already exists for this email",
                    )
                )

            invitation = Invitation(
                teamspace_id=teamspace.id,
                channel_id=channel.id if channel else None,
                email=email,
                role=proposed_role.value,
                token=generate_invitation_token(),
                max_attempts=ApplicationConfig.INVITATION_MAX_ATTEMPTS,
                created_by=inviter_id,
                expires_at=calculate_invitation_expiry(),
            )
            invitation = await self.uow.invitations.create(invitation)

            audit = AuditEvent(
                teamspace_id=teamspace.id,
                user_id=inviter_id,
                action="invitation.created",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "email": email,
                    "role": invitation.role,
                    "scope": scope_kind.value,
                    "channel_id": str(channel.id) if channel else None,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(
                f"Invitation {invitation.id} created for {scope_kind.value} "
                f"{channel.slug if channel else teamspace.slug}"
            )

            return Return.ok(
                CreateInvitationResponse(
                    invitation_id=str(invitation.id),
                    email=invitation.email,
                    role=invitation.role,
                    scope=scope_kind.value,
                    channel_slug=channel.slug if channel else None,
                    invitation_url=f"{ApplicationConfig.APP_URL.rstrip('/')}/invite/{invitation.token}",
                    expires_at=invitation.expires_at,
                )
            )
