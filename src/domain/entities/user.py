"""
User Entity

Represents a person who can belong to multiple teamspaces.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel


class User(SQLModel, table=True):
    """
    User entity - represents a person who can belong to multiple teamspaces.

    Business Rules:
    - Email must be unique across all users (stored lowercase)
    - Identity is immutable; password_hash changes only via change-password
    - Password stored as bcrypt hash
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    name: Optional[str] = Field(default=None, max_length=100)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
