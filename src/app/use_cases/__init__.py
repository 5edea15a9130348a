"""
Use Cases

Organized into domain folders:
- auth/: Login, logout, current user, password change
- invitations/: Invitation lifecycle
- memberships/: Role changes and removals
- setup/: First-run bootstrap
- access/: Effective role lookups
"""

from .auth import (
    ChangePasswordUseCase,
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
)
from .invitations import (
    AcceptInvitationUseCase,
    CreateInvitationUseCase,
    ListInvitationsUseCase,
    RevokeInvitationUseCase,
    ValidateInvitationUseCase,
)
from .memberships import ChangeMemberRoleUseCase, RemoveMemberUseCase
from .setup import CompleteSetupUseCase, GetSetupStatusUseCase
from .access import GetEffectiveRoleUseCase

__all__ = [
    # Auth
    "LoginUseCase",
    "LogoutUseCase",
    "ChangePasswordUseCase",
    "GetCurrentUserUseCase",
    # Invitations
    "CreateInvitationUseCase",
    "ValidateInvitationUseCase",
    "AcceptInvitationUseCase",
    "RevokeInvitationUseCase",
    "ListInvitationsUseCase",
    # Memberships
    "ChangeMemberRoleUseCase",
    "RemoveMemberUseCase",
    # Setup
    "CompleteSetupUseCase",
    "GetSetupStatusUseCase",
    # Access
    "GetEffectiveRoleUseCase",
]
