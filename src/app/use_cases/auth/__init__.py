"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .change_password_use_case import ChangePasswordUseCase
from .get_current_user_use_case import GetCurrentUserUseCase
from .dtos import (
    ChangePasswordCommand,
    ChangePasswordResponse,
    CurrentUserResponse,
    LoginCommand,
    LoginResult,
    LogoutResponse,
    TeamspaceInfo,
    UserInfo,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "LogoutUseCase",
    "ChangePasswordUseCase",
    "GetCurrentUserUseCase",
    # DTOs - Commands
    "LoginCommand",
    "ChangePasswordCommand",
    # DTOs - Responses
    "LoginResult",
    "LogoutResponse",
    "ChangePasswordResponse",
    "CurrentUserResponse",
    # DTOs - Nested Models
    "UserInfo",
    "TeamspaceInfo",
]
