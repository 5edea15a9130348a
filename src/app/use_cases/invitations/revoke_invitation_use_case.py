"""
Revoke Invitation Use Case

Withdraws a pending invitation so its token can no longer be accepted.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.access_resolver import NOT_FOUND, EffectiveAccessResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    ChannelRole,
    InvitationStatus,
    TeamspaceRole,
)

from .dtos import RevokeInvitationResponse

logger = logging.getLogger(__name__)


class RevokeInvitationUseCase:
    """
    Use case for revoking pending invitations.

    Business Rules:
    - Teamspace invitations: teamspace admin or owner
    - Channel invitations: effective owner of that channel
    - Only pending invitations can be revoked
    - Invitations of other teamspaces look like missing ones
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, teamspace_slug: str, invitation_id: UUID
    ) -> Result[RevokeInvitationResponse]:
        async with self.uow:
            resolver = EffectiveAccessResolver(self.uow)

            effective = await resolver.resolve(user_id, teamspace_slug)
            if effective is None:
                return Return.err(NOT_FOUND)

            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None or invitation.teamspace_id != effective.teamspace.id:
                return Return.err(NOT_FOUND)

            # Authorization depends on the invitation's scope
            if invitation.channel_id is not None:
                channel = await self.uow.channels.get_by_id(invitation.channel_id)
                if channel is None:
                    return Return.err(NOT_FOUND)
                access = await resolver.require(
                    user_id, ChannelRole.owner, teamspace_slug, channel.slug
                )
            else:
                access = await resolver.require(user_id, TeamspaceRole.admin, teamspace_slug)
            if access.is_err():
                return access

            if invitation.status == InvitationStatus.accepted:
                return Return.err(
                    Error(
                        "INVITATION_ALREADY_ACCEPTED",
                        "Cannot revoke an invitation that has already been accepted",
                    )
                )
            if invitation.status == InvitationStatus.revoked:
                return Return.err(
                    Error("INVITATION_ALREADY_REVOKED", "Invitation was already revoked")
                )

            invitation.status = InvitationStatus.revoked
            await self.uow.invitations.update(invitation)

            audit = AuditEvent(
                teamspace_id=invitation.teamspace_id,
                user_id=user_id,
                action="invitation.revoked",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "email": invitation.email,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"Invitation {invitation.id} revoked by user {user_id}")

            return Return.ok(
                RevokeInvitationResponse(
                    invitation_id=str(invitation.id),
                    status=InvitationStatus.revoked.value,
                )
            )
