"""
TeamspaceMembership Entity

Links a User to a Teamspace with a role.
"""

from datetime import datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import TeamspaceRole


class TeamspaceMembership(SQLModel, table=True):
    """
    TeamspaceMembership entity - the access gate for everything in a teamspace.

    Business Rules:
    - (user_id, teamspace_id) is unique
    - A teamspace always keeps at least one owner
    - Teamspace owner/admin implies channel owner everywhere in the teamspace
    """

    __tablename__ = "teamspace_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    teamspace_id: UUID = Field(
        sa_column=Column(
            sa.Uuid,
            sa.ForeignKey("teamspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )

    role: TeamspaceRole = Field(nullable=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index(
            "idx_teamspace_membership_user_teamspace",
            "user_id",
            "teamspace_id",
            unique=True,
        ),
    )
