"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain.
"""

from typing import List, Optional

from pydantic import BaseModel, EmailStr


# ============================================================================
# Command DTOs
# ============================================================================


class LoginCommand(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordCommand(BaseModel):
    current_password: str
    new_password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """User information in authentication responses"""

    id: str
    email: str
    name: Optional[str] = None


class TeamspaceInfo(BaseModel):
    """Teamspace the user belongs to, with their role there"""

    id: str
    name: str
    slug: str
    role: str


class LoginResult(BaseModel):
    """Result of login use case, including the new session"""

    user: UserInfo
    session_token: str
    session_cookie: str


class LogoutResponse(BaseModel):
    status: str
    session_cookie: str


class CurrentUserResponse(BaseModel):
    """Response for the current user (me) use case"""

    user: UserInfo
    teamspaces: List[TeamspaceInfo]


class ChangePasswordResponse(BaseModel):
    status: str
    sessions_revoked: int
