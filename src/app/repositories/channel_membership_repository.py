from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import ChannelMembership, ChannelRole


class IChannelMembershipRepository(ABC):
    """ChannelMembership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_channel(
        self, user_id: UUID, channel_id: UUID
    ) -> Optional[ChannelMembership]:
        """Get membership by user and channel"""
        pass

    @abstractmethod
    async def count_by_role(
        self, channel_id: UUID, role: ChannelRole, for_update: bool = False
    ) -> int:
        """Count direct members of a channel holding a role (for_update locks those rows)"""
        pass

    @abstractmethod
    async def delete_by_user_and_teamspace(self, user_id: UUID, teamspace_id: UUID) -> int:
        """Delete a user's memberships in every channel of a teamspace"""
        pass

    @abstractmethod
    async def create(self, membership: ChannelMembership) -> ChannelMembership:
        """Create a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: ChannelMembership) -> ChannelMembership:
        """Update existing membership"""
        pass

    @abstractmethod
    async def delete(self, membership: ChannelMembership) -> None:
        """Delete a membership"""
        pass
