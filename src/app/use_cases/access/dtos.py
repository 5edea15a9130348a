from typing import Optional

from pydantic import BaseModel


class EffectiveRoleResponse(BaseModel):
    """The caller's role at the resolved scope"""

    teamspace_slug: str
    teamspace_role: str
    channel_slug: Optional[str] = None
    channel_role: Optional[str] = None
    scope: str
    role: str
