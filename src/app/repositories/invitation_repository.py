from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Invitation


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def get_pending_for_email(
        self, teamspace_id: UUID, channel_id: Optional[UUID], email: str, now: datetime
    ) -> Optional[Invitation]:
        """Get a pending, unexpired invitation for the same scope and email"""
        pass

    @abstractmethod
    async def get_pending_by_teamspace_id(self, teamspace_id: UUID) -> List[Invitation]:
        """Get pending invitations of a teamspace, oldest first"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        pass

    @abstractmethod
    async def increment_attempts(self, invitation_id: UUID) -> None:
        """Atomically add one to the attempt counter"""
        pass

    @abstractmethod
    async def mark_accepted_if_pending(self, invitation_id: UUID, accepted_at: datetime) -> bool:
        """
        Move a pending invitation to accepted.

        Returns False when the row was no longer pending, i.e. another
        acceptance won the race.
        """
        pass
