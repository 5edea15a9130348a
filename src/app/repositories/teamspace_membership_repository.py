from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import TeamspaceMembership, TeamspaceRole


class ITeamspaceMembershipRepository(ABC):
    """TeamspaceMembership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_teamspace(
        self, user_id: UUID, teamspace_id: UUID
    ) -> Optional[TeamspaceMembership]:
        """Get membership by user and teamspace"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> List[TeamspaceMembership]:
        """Get all teamspace memberships of a user"""
        pass

    @abstractmethod
    async def count_by_role(
        self, teamspace_id: UUID, role: TeamspaceRole, for_update: bool = False
    ) -> int:
        """Count members of a teamspace holding a role (for_update locks those rows)"""
        pass

    @abstractmethod
    async def create(self, membership: TeamspaceMembership) -> TeamspaceMembership:
        """Create a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: TeamspaceMembership) -> TeamspaceMembership:
        """Update existing membership"""
        pass

    @abstractmethod
    async def delete(self, membership: TeamspaceMembership) -> None:
        """Delete a membership"""
        pass
