"""
Membership Use Case DTOs
"""

from typing import Optional

from pydantic import BaseModel


class ChangeMemberRoleCommand(BaseModel):
    """Command for changing a member's role"""

    role: str


class MembershipResponse(BaseModel):
    """Membership state after a change"""

    user_id: str
    scope: str
    teamspace_slug: str
    channel_slug: Optional[str] = None
    role: Optional[str] = None
    status: str
