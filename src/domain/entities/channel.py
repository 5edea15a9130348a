"""
Channel Entity

A collaboration unit inside a teamspace. "Project" and "channel" name the
same thing; this is the single canonical entity for both.
"""

from datetime import datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlmodel import Column, DateTime, Field, Index, SQLModel


class Channel(SQLModel, table=True):
    """
    Channel entity - belongs to exactly one teamspace.

    Business Rules:
    - teamspace_id is fixed at creation (repositories expose no way to move it)
    - (teamspace_id, slug) is unique
    """

    __tablename__ = "channels"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    teamspace_id: UUID = Field(
        sa_column=Column(
            sa.Uuid,
            sa.ForeignKey("teamspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    name: str = Field(max_length=100)
    slug: str = Field(max_length=100)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_channel_teamspace_slug", "teamspace_id", "slug", unique=True),
    )
