from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.channel_repository import IChannelRepository
from src.domain.entities import Channel


class ChannelRepository(IChannelRepository):
    """Channel repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, channel_id: UUID) -> Optional[Channel]:
        """Get channel by ID"""
        stmt = select(Channel).where(Channel.id == channel_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, teamspace_id: UUID, slug: str) -> Optional[Channel]:
        """Get channel by slug within a teamspace"""
        stmt = select(Channel).where(
            Channel.teamspace_id == teamspace_id, Channel.slug == slug
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, channel: Channel) -> Channel:
        """Create a new channel"""
        self.session.add(channel)
        await self.session.flush()
        await self.session.refresh(channel)
        return channel
