"""
Session Entity

Server-side record of an opaque session token.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class Session(SQLModel, table=True):
    """
    Session entity - keyed by HMAC-SHA256 of the session token.

    Business Rules:
    - The raw token is never stored
    - Expires after 30 days, extended when used within 7 days of expiry
    - Expired rows are deleted when encountered
    """

    __tablename__ = "sessions"

    id: str = Field(primary_key=True, max_length=64)  # hex HMAC of the token

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)
