"""
Invitation Entity

Single-use, time-boxed invitation into a teamspace or one of its channels.
"""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import ChannelRole, InvitationStatus, ScopeKind, TeamspaceRole


class Invitation(SQLModel, table=True):
    """
    Invitation entity - pending invitation to join a scope with a role.

    Business Rules:
    - Token is 64 lowercase hex chars (32 random bytes), unique
    - Expires 24 hours after creation
    - attempts >= max_attempts locks the invitation
    - channel_id set means the scope is that channel, otherwise the teamspace
    - role is a TeamspaceRole or ChannelRole value depending on scope
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    teamspace_id: UUID = Field(
        sa_column=Column(
            sa.Uuid,
            sa.ForeignKey("teamspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    channel_id: Optional[UUID] = Field(
        default=None,
        sa_column=Column(
            sa.Uuid,
            sa.ForeignKey("channels.id", ondelete="CASCADE"),
            nullable=True,
        ),
    )
    email: str = Field(max_length=255, nullable=False, index=True)

    role: str = Field(max_length=20, nullable=False)
    token: str = Field(unique=True, index=True, max_length=64)

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    attempts: int = Field(default=0)
    max_attempts: int = Field(default=3)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_invitation_expires_at", "expires_at"),
        Index("idx_invitation_teamspace_email", "teamspace_id", "email"),
        Index("idx_invitation_status", "status"),
    )

    @property
    def scope_kind(self) -> ScopeKind:
        return ScopeKind.channel if self.channel_id else ScopeKind.teamspace

    @property
    def proposed_role(self) -> Union[TeamspaceRole, ChannelRole]:
        if self.scope_kind == ScopeKind.channel:
            return ChannelRole(self.role)
        return TeamspaceRole(self.role)
