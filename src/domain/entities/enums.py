"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class ScopeKind(str, Enum):
    """Kind of scope a role or invitation applies to"""

    teamspace = "teamspace"
    channel = "channel"


class TeamspaceRole(str, Enum):
    """User role within a teamspace"""

    viewer = "viewer"
    editor = "editor"
    admin = "admin"
    owner = "owner"


class ChannelRole(str, Enum):
    """User role within a channel (historically also called a project)"""

    viewer = "viewer"
    editor = "editor"
    owner = "owner"


class InvitationStatus(str, Enum):
    """Stored invitation status; expired and locked are derived, never stored"""

    pending = "pending"
    accepted = "accepted"
    revoked = "revoked"


class DeploymentMode(str, Enum):
    """Single-tenant deployments imply the reserved teamspace slug"""

    single_tenant = "single-tenant"
    multi_tenant = "multi-tenant"
