"""
Change Member Role Use Case

Changes a member's role within a teamspace or one of its channels.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, ChannelMembership
from src.domain.roles import coerce_role, top_role

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


class ChangeMemberRoleUseCase:
    """
    Use case for changing a member's role.

    Business Rules:
    - Teamspace roles are managed by teamspace admins and owners
    - Channel roles are managed by effective channel owners
    - Only teamspace owners may grant or take away the teamspace owner role
    - The last owner of a scope cannot be demoted
    - At channel scope, a teamspace member without a direct channel row
      gets one (e.g. a teamspace viewer promoted to channel editor)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor_id: UUID,
        teamspace_slug: str,
        target_user_id: UUID,
        new_role: str,
        channel_slug: Optional[str] = None,
    ) -> Result[MembershipResponse]:
        """
        Execute change member role use case.

        Args:
            actor_id: Authenticated user making the change
            teamspace_slug: Teamspace slug
            target_user_id: Member whose role changes
            new_role: Role value at the target scope kind
            channel_slug: Channel slug, None for the teamspace role

        Returns:
            Result with MembershipResponse, or Error
        """
        async with self.uow:
            access = await require_manager(self.uow, actor_id, teamspace_slug, channel_slug)
            if access.is_err():
                return access
            scope = access.value

            try:
                role = coerce_role(scope.scope_kind, new_role)
            except ValueError:
                return Return.err(
                    Error("INVALID_ROLE", f"'{new_role}' is not a {scope.scope_kind.value} role")
                )

            membership = await get_membership(self.uow, scope, target_user_id)
            if membership is None:
                # Channel rows can be created for existing teamspace members
                if scope.channel is None or (
                    await self.uow.teamspace_memberships.get_by_user_and_teamspace(
                        target_user_id, scope.teamspace.id
                    )
                ) is None:
                    return Return.err(
                        Error("MEMBERSHIP_NOT_FOUND", "User is not a member")
                    )

            owner = top_role(scope.scope_kind)
            old_role = membership.role if membership else None
            if (old_role == owner or role == owner) and not can_touch_owners(scope):
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only owners can grant or change the owner role")
                )

            if old_role == owner and role != owner:
                error = ensure_keeps_owner(
                    scope, old_role, await count_owners(self.uow, scope), role
                )
                if error is not None:
                    return Return.err(error)

            repository = memberships_repository(self.uow, scope)
            if membership is None:
                membership = await repository.create(
                    ChannelMembership(
                        user_id=target_user_id, channel_id=scope.channel.id, role=role
                    )
                )
            else:
                membership.role = role
                membership = await repository.update(membership)

            audit = AuditEvent(
                teamspace_id=scope.teamspace.id,
                user_id=actor_id,
                action="member.role_changed",
                event_metadata={
                    "target_user_id": str(target_user_id),
                    "old_role": old_role.value if old_role else None,
                    "new_role": role.value,
                    **audit_scope(scope),
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(
                f"User {actor_id} changed {scope.scope_kind.value} role of "
                f"{target_user_id} to {role.value}"
            )

            return Return.ok(
                MembershipResponse(
                    user_id=str(target_user_id),
                    scope=scope.scope_kind.value,
                    teamspace_slug=scope.teamspace.slug,
                    channel_slug=scope.channel.slug if scope.channel else None,
                    role=role.value,
                    status="updated",
                )
            )
