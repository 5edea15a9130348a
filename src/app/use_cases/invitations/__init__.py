"""
Invitation Use Cases

Creating, checking, accepting and revoking invitations.
"""

from .create_invitation_use_case import CreateInvitationUseCase
from .validate_invitation_use_case import (
    INVITATION_REJECTION_CODES,
    ValidateInvitationUseCase,
    check_invitation,
)
from .accept_invitation_use_case import AcceptInvitationUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .dtos import (
    AcceptInvitationCommand,
    AcceptInvitationResult,
    CreateInvitationCommand,
    CreateInvitationResponse,
    InvitationDetails,
    InvitationSummary,
    ListInvitationsResponse,
    RevokeInvitationResponse,
)

__all__ = [
    # Use Cases
    "CreateInvitationUseCase",
    "ValidateInvitationUseCase",
    "AcceptInvitationUseCase",
    "RevokeInvitationUseCase",
    "ListInvitationsUseCase",
    "check_invitation",
    "INVITATION_REJECTION_CODES",
    # DTOs - Commands
    "CreateInvitationCommand",
    "AcceptInvitationCommand",
    # DTOs - Responses
    "CreateInvitationResponse",
    "InvitationDetails",
    "AcceptInvitationResult",
    "InvitationSummary",
    "ListInvitationsResponse",
    "RevokeInvitationResponse",
]
