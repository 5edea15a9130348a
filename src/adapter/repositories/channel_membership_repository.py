from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.channel_membership_repository import (
    IChannelMembershipRepository,
)
from src.domain.entities import Channel, ChannelMembership, ChannelRole


class ChannelMembershipRepository(IChannelMembershipRepository):
    """ChannelMembership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_channel(
        self, user_id: UUID, channel_id: UUID
    ) -> Optional[ChannelMembership]:
        """Get membership by user and channel"""
        stmt = select(ChannelMembership).where(
            ChannelMembership.user_id == user_id,
            ChannelMembership.channel_id == channel_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_role(
        self, channel_id: UUID, role: ChannelRole, for_update: bool = False
    ) -> int:
        """
        Count direct members of a channel holding a role.

        With for_update the matching rows stay locked until the transaction
        ends, so concurrent owner changes are serialized.
        """
        if for_update:
            stmt = (
                select(ChannelMembership.id)
                .where(
                    ChannelMembership.channel_id == channel_id,
                    ChannelMembership.role == role,
                )
                .with_for_update()
            )
            result = await self.session.execute(stmt)
            return len(result.scalars().all())

        stmt = (
            select(func.count())
            .select_from(ChannelMembership)
            .where(
                ChannelMembership.channel_id == channel_id,
                ChannelMembership.role == role,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def delete_by_user_and_teamspace(self, user_id: UUID, teamspace_id: UUID) -> int:
        """Delete a user's memberships in every channel of a teamspace"""
        channel_ids = select(Channel.id).where(Channel.teamspace_id == teamspace_id)
        stmt = delete(ChannelMembership).where(
            ChannelMembership.user_id == user_id,
            ChannelMembership.channel_id.in_(channel_ids),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def create(self, membership: ChannelMembership) -> ChannelMembership:
        """Create a new membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: ChannelMembership) -> ChannelMembership:
        """Update existing membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: ChannelMembership) -> None:
        """Delete a membership"""
        await self.session.delete(membership)
        await self.session.flush()
