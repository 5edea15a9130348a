from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Teamspace


class ITeamspaceRepository(ABC):
    """Teamspace repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, teamspace_id: UUID) -> Optional[Teamspace]:
        """Get teamspace by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Teamspace]:
        """Get teamspace by slug"""
        pass

    @abstractmethod
    async def create(self, teamspace: Teamspace) -> Teamspace:
        """Create a new teamspace"""
        pass
