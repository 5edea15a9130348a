"""
Invitation Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the invitation domain.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr


# ============================================================================
# Command DTOs
# ============================================================================


class CreateInvitationCommand(BaseModel):
    """Command for inviting someone into a teamspace or channel"""

    email: EmailStr
    role: str
    channel_slug: Optional[str] = None


class AcceptInvitationCommand(BaseModel):
    """Command for accepting an invitation (password only for new accounts)"""

    password: Optional[str] = None
    name: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInvitationResponse(BaseModel):
    """Response for create invitation use case"""

    invitation_id: str
    email: str
    role: str
    scope: str
    channel_slug: Optional[str] = None
    invitation_url: str
    expires_at: datetime


class InvitationDetails(BaseModel):
    """What an invitee may see about a valid invitation"""

    email: str
    role: str
    scope: str
    teamspace_name: str
    teamspace_slug: str
    channel_name: Optional[str] = None
    channel_slug: Optional[str] = None
    expires_at: datetime
    account_exists: bool


class AcceptInvitationResult(BaseModel):
    """Result of accepting an invitation, including the new session"""

    user_id: str
    email: str
    role: str
    scope: str
    teamspace_slug: str
    channel_slug: Optional[str] = None
    is_new_user: bool
    session_token: str
    session_cookie: str


class InvitationSummary(BaseModel):
    """Pending invitation as listed for teamspace admins (never the token)"""

    invitation_id: str
    email: str
    role: str
    scope: str
    channel_id: Optional[str] = None
    attempts: int
    expires_at: datetime
    created_at: datetime


class ListInvitationsResponse(BaseModel):
    """Response for list pending invitations use case"""

    invitations: List[InvitationSummary]
    total: int


class RevokeInvitationResponse(BaseModel):
    """Response for revoke invitation use case"""

    invitation_id: str
    status: str
