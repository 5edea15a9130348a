from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.teamspace_membership_repository import (
    ITeamspaceMembershipRepository,
)
from src.domain.entities import TeamspaceMembership, TeamspaceRole


class TeamspaceMembershipRepository(ITeamspaceMembershipRepository):
    """TeamspaceMembership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_teamspace(
        self, user_id: UUID, teamspace_id: UUID
    ) -> Optional[TeamspaceMembership]:
        """Get membership by user and teamspace"""
        stmt = select(TeamspaceMembership).where(
            TeamspaceMembership.user_id == user_id,
            TeamspaceMembership.teamspace_id == teamspace_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> List[TeamspaceMembership]:
        """Get all teamspace memberships of a user"""
        stmt = (
            select(TeamspaceMembership)
            .where(TeamspaceMembership.user_id == user_id)
            .order_by(TeamspaceMembership.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_role(
        self, teamspace_id: UUID, role: TeamspaceRole, for_update: bool = False
    ) -> int:
        """
        Count members of a teamspace holding a role.

        With for_update the matching rows stay locked until the transaction
        ends, so concurrent owner changes are serialized.
        """
        if for_update:
            stmt = (
                select(TeamspaceMembership.id)
                .where(
                    TeamspaceMembership.teamspace_id == teamspace_id,
                    TeamspaceMembership.role == role,
                )
                .with_for_update()
            )
            result = await self.session.execute(stmt)
            return len(result.scalars().all())

        stmt = (
            select(func.count())
            .select_from(TeamspaceMembership)
            .where(
                TeamspaceMembership.teamspace_id == teamspace_id,
                TeamspaceMembership.role == role,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, membership: TeamspaceMembership) -> TeamspaceMembership:
        """Create a new membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: TeamspaceMembership) -> TeamspaceMembership:
        """Update existing membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: TeamspaceMembership) -> None:
        """Delete a membership"""
        await self.session.delete(membership)
        await self.session.flush()
