"""
Remove Member Use Case

Removes a member from a teamspace or one of its channels.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.roles import top_role

from ._scope import (
    audit_scope,
    can_touch_owners,
    count_owners,
    ensure_keeps_owner,
    get_membership,
    memberships_repository,
    require_manager,
)
from .dtos import MembershipResponse

logger = logging.getLogger(__name__)


class RemoveMemberUseCase:
    """
    Use case for removing a member.

    Business Rules:
    - Same managers as ChangeMemberRoleUseCase
    - Only teamspace owners may remove a teamspace owner
    - The last owner of a scope cannot be removed, not even by themselves
    - Removing a teamspace membership also removes the user's direct
      memberships in that teamspace's channels
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor_id: UUID,
        teamspace_slug: str,
        target_user_id: UUID,
        channel_slug: Optional[str] = None,
    ) -> Result[MembershipResponse]:
        async with self.uow:
            access = await require_manager(self.uow, actor_id, teamspace_slug, channel_slug)
            if access.is_err():
                return access
            scope = access.value

            membership = await get_membership(self.uow, scope, target_user_id)
            if membership is None:
                return Return.err(Error("MEMBERSHIP_NOT_FOUND", "User is not a member"))

            if membership.role == top_role(scope.scope_kind):
                if not can_touch_owners(scope):
                    return Return.err(
                        Error("INSUFFICIENT_ROLE", "Only owners can remove an owner")
                    )
                error = ensure_keeps_owner(
                    scope, membership.role, await count_owners(self.uow, scope)
                )
                if error is not None:
                    return Return.err(error)

            removed_role = membership.role
            await memberships_repository(self.uow, scope).delete(membership)

            # Direct channel roles must not outlive the teamspace membership
            channel_rows_removed = 0
            if scope.channel is None:
                channel_memberships = self.uow.channel_memberships
                channel_rows_removed = await channel_memberships.delete_by_user_and_teamspace(
                    target_user_id, scope.teamspace.id
                )

            audit = AuditEvent(
                teamspace_id=scope.teamspace.id,
                user_id=actor_id,
                action="member.removed",
                event_metadata={
                    "target_user_id": str(target_user_id),
                    "role": removed_role.value,
                    "channel_memberships_removed": channel_rows_removed,
                    **audit_scope(scope),
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(
                f"User {actor_id} removed {target_user_id} from "
                f"{scope.scope_kind.value} {scope.channel.slug if scope.channel else scope.teamspace.slug}"
            )

            return Return.ok(
                MembershipResponse(
                    user_id=str(target_user_id),
                    scope=scope.scope_kind.value,
                    teamspace_slug=scope.teamspace.slug,
                    channel_slug=scope.channel.slug if scope.channel else None,
                    role=None,
                    status="removed",
                )
            )
