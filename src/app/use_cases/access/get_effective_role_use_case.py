"""
Get Effective Role Use Case

Resolves the caller's role on a teamspace or channel path.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.access_resolver import NOT_FOUND, EffectiveAccessResolver
from src.app.services.unit_of_work import UnitOfWork

from .dtos import EffectiveRoleResponse


class GetEffectiveRoleUseCase:
    """
    Business Rules:
    - Unknown teamspace, unknown channel and no membership all give NOT_FOUND
    - Channel role is the stronger of the direct channel role and the role
      implied by the teamspace role
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, teamspace_slug: str, channel_slug: Optional[str] = None
    ) -> Result[EffectiveRoleResponse]:
        async with self.uow:
            effective = await EffectiveAccessResolver(self.uow).resolve(
                user_id, teamspace_slug, channel_slug
            )
            if effective is None:
                return Return.err(NOT_FOUND)

            return Return.ok(
                EffectiveRoleResponse(
                    teamspace_slug=effective.teamspace.slug,
                    teamspace_role=effective.teamspace_role.value,
                    channel_slug=effective.channel.slug if effective.channel else None,
                    channel_role=effective.channel_role.value if effective.channel_role else None,
                    scope=effective.scope_kind.value,
                    role=effective.role.value,
                )
            )
