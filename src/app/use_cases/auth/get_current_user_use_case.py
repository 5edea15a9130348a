"""
Get Current User Use Case

Loads the signed-in user and the teamspaces they belong to.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import CurrentUserResponse, TeamspaceInfo, UserInfo


class GetCurrentUserUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[CurrentUserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            teamspaces = []
            for membership in await self.uow.teamspace_memberships.get_by_user_id(user.id):
                teamspace = await self.uow.teamspaces.get_by_id(membership.teamspace_id)
                if teamspace is None:
                    continue
                teamspaces.append(
                    TeamspaceInfo(
                        id=str(teamspace.id),
                        name=teamspace.name,
                        slug=teamspace.slug,
                        role=membership.role.value,
                    )
                )

            return Return.ok(
                CurrentUserResponse(
                    user=UserInfo(id=str(user.id), email=user.email, name=user.name),
                    teamspaces=teamspaces,
                )
            )
