from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.teamspace_repository import ITeamspaceRepository
from src.domain.entities import Teamspace


class TeamspaceRepository(ITeamspaceRepository):
    """Teamspace repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, teamspace_id: UUID) -> Optional[Teamspace]:
        """Get teamspace by ID"""
        stmt = select(Teamspace).where(Teamspace.id == teamspace_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Teamspace]:
        """Get teamspace by slug"""
        stmt = select(Teamspace).where(Teamspace.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, teamspace: Teamspace) -> Teamspace:
        """Create a new teamspace"""
        self.session.add(teamspace)
        await self.session.flush()
        await self.session.refresh(teamspace)
        return teamspace
