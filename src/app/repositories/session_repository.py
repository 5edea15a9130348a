from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: str) -> Optional[Session]:
        """Get session by ID (the keyed hash of its token)"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def update(self, session: Session) -> Session:
        """Update existing session"""
        pass

    @abstractmethod
    async def delete_by_id(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_all_except(self, user_id: UUID, session_id: str) -> int:
        """Delete all sessions of a user except one. Returns count."""
        pass
