from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import Invitation, InvitationStatus


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        stmt = select(Invitation).where(Invitation.token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_for_email(
        self, teamspace_id: UUID, channel_id: Optional[UUID], email: str, now: datetime
    ) -> Optional[Invitation]:
        """Get a pending, unexpired invitation for the same scope and email"""
        stmt = select(Invitation).where(
            Invitation.teamspace_id == teamspace_id,
            Invitation.email == email.lower(),
            Invitation.status == InvitationStatus.pending,
            Invitation.expires_at > now,
        )
        if channel_id is None:
            stmt = stmt.where(Invitation.channel_id.is_(None))
        else:
            stmt = stmt.where(Invitation.channel_id == channel_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def get_pending_by_teamspace_id(self, teamspace_id: UUID) -> List[Invitation]:
        """Get pending invitations of a teamspace, oldest first"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.teamspace_id == teamspace_id,
                Invitation.status == InvitationStatus.pending,
            )
            .order_by(Invitation.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def increment_attempts(self, invitation_id: UUID) -> None:
        """Atomically add one to the attempt counter"""
        stmt = (
            update(Invitation)
            .where(Invitation.id == invitation_id)
            .values(attempts=Invitation.attempts + 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def mark_accepted_if_pending(self, invitation_id: UUID, accepted_at: datetime) -> bool:
        """Conditional update; the status check in WHERE serializes racing accepts"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.status == InvitationStatus.pending,
            )
            .values(status=InvitationStatus.accepted, accepted_at=accepted_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
