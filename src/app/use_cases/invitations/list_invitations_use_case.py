"""
List Invitations Use Case

Pending invitations of a teamspace, for its admins.
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.access_resolver import EffectiveAccessResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TeamspaceRole

from .dtos import InvitationSummary, ListInvitationsResponse


class ListInvitationsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, teamspace_slug: str) -> Result[ListInvitationsResponse]:
        async with self.uow:
            access = await EffectiveAccessResolver(self.uow).require(
                user_id, TeamspaceRole.admin, teamspace_slug
            )
            if access.is_err():
                return access

            invitations = await self.uow.invitations.get_pending_by_teamspace_id(
                access.value.teamspace.id
            )

            summaries = [
                InvitationSummary(
                    invitation_id=str(inv.id),
                    email=inv.email,
                    role=inv.role,
                    scope=inv.scope_kind.value,
                    channel_id=str(inv.channel_id) if inv.channel_id else None,
                    attempts=inv.attempts,
                    expires_at=inv.expires_at,
                    created_at=inv.created_at,
                )
                for inv in invitations
            ]

            return Return.ok(ListInvitationsResponse(invitations=summaries, total=len(summaries)))
