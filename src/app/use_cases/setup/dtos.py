"""
Setup Use Case DTOs
"""

from typing import List, Optional

from pydantic import BaseModel, EmailStr


class SetupCommand(BaseModel):
    """First-run input: the owner account and the initial teamspace"""

    email: EmailStr
    password: str
    name: Optional[str] = None
    teamspace_name: str = "Workspace"
    channel_name: str = "My Channel"


class SetupResult(BaseModel):
    """Result of a completed setup, including the owner's session"""

    user_id: str
    email: str
    teamspace_slug: str
    channel_slug: str
    session_token: str
    session_cookie: str


class SetupStatusResponse(BaseModel):
    """Whether first-run setup still has to happen"""

    setup_complete: bool
    completed_at: Optional[str] = None
    mode: str
    missing_requirements: List[str]
