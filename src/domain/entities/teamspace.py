"""
Teamspace Entity

Top-level tenant boundary owning its channels.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

# Slug of the implicit teamspace in single-tenant deployments
DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG = "workspace"


class Teamspace(SQLModel, table=True):
    """
    Teamspace entity - top-level multi-tenant boundary.

    Business Rules:
    - Slug is unique; DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG is reserved
    - Deleting a teamspace cascades to its channels and memberships
    """

    __tablename__ = "teamspaces"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(unique=True, index=True, max_length=100)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
