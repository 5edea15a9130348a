"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    ChannelRole,
    DeploymentMode,
    InvitationStatus,
    ScopeKind,
    TeamspaceRole,
)

# Export all entities
from .user import User
from .teamspace import DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG, Teamspace
from .channel import Channel
from .teamspace_membership import TeamspaceMembership
from .channel_membership import ChannelMembership
from .invitation import Invitation
from .session import Session
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ChannelRole",
    "DeploymentMode",
    "InvitationStatus",
    "ScopeKind",
    "TeamspaceRole",
    # Entities
    "User",
    "Teamspace",
    "Channel",
    "TeamspaceMembership",
    "ChannelMembership",
    "Invitation",
    "Session",
    "AuditEvent",
    # Constants
    "DEFAULT_SINGLE_TENANT_TEAMSPACE_SLUG",
]
