"""
ChannelMembership Entity

Optional direct role on a channel. Absence means the user's channel access
comes entirely from their teamspace role.
"""

from datetime import datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import ChannelRole


class ChannelMembership(SQLModel, table=True):
    """
    ChannelMembership entity - links a User to a Channel with a role.

    Business Rules:
    - (user_id, channel_id) is unique
    - Never grants access on its own; teamspace membership is required
    """

    __tablename__ = "channel_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    channel_id: UUID = Field(
        sa_column=Column(
            sa.Uuid,
            sa.ForeignKey("channels.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )

    role: ChannelRole = Field(nullable=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index(
            "idx_channel_membership_user_channel",
            "user_id",
            "channel_id",
            unique=True,
        ),
    )
