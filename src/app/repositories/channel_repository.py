from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Channel


class IChannelRepository(ABC):
    """
    Channel repository interface - application layer

    There is deliberately no update(): a channel never changes teamspace.
    """

    @abstractmethod
    async def get_by_id(self, channel_id: UUID) -> Optional[Channel]:
        """Get channel by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, teamspace_id: UUID, slug: str) -> Optional[Channel]:
        """Get channel by slug within a teamspace"""
        pass

    @abstractmethod
    async def create(self, channel: Channel) -> Channel:
        """Create a new channel"""
        pass
