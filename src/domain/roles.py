"""
Role Hierarchy

Single source of truth for role ranks per scope kind. Every other module
compares roles through rank() / satisfies(); nothing else orders roles.
"""

from typing import Dict, Type, Union

from .entities.enums import ChannelRole, ScopeKind, TeamspaceRole

Role = Union[TeamspaceRole, ChannelRole, str]

CHANNEL_ROLE_RANKS: Dict[ChannelRole, int] = {
    ChannelRole.viewer: 1,
    ChannelRole.editor: 2,
    ChannelRole.owner: 3,
}

TEAMSPACE_ROLE_RANKS: Dict[TeamspaceRole, int] = {
    TeamspaceRole.viewer: 1,
    TeamspaceRole.editor: 2,
    TeamspaceRole.admin: 3,
    TeamspaceRole.owner: 4,
}

ROLE_TYPES: Dict[ScopeKind, Type] = {
    ScopeKind.teamspace: TeamspaceRole,
    ScopeKind.channel: ChannelRole,
}

ROLE_RANKS: Dict[ScopeKind, Dict] = {
    ScopeKind.teamspace: TEAMSPACE_ROLE_RANKS,
    ScopeKind.channel: CHANNEL_ROLE_RANKS,
}

# Role a teamspace membership implies on every channel of that teamspace
IMPLIED_CHANNEL_ROLES: Dict[TeamspaceRole, ChannelRole] = {
    TeamspaceRole.owner: ChannelRole.owner,
    TeamspaceRole.admin: ChannelRole.owner,
    TeamspaceRole.editor: ChannelRole.editor,
    TeamspaceRole.viewer: ChannelRole.viewer,
}


def _check_exhaustive() -> None:
    for scope_kind in ScopeKind:
        role_type = ROLE_TYPES[scope_kind]
        missing = set(role_type) - set(ROLE_RANKS[scope_kind])
        if missing:
            raise RuntimeError(
                f"Rank table for {scope_kind.value} is missing {sorted(m.value for m in missing)}"
            )
    missing = set(TeamspaceRole) - set(IMPLIED_CHANNEL_ROLES)
    if missing:
        raise RuntimeError(
            f"No implied channel role for {sorted(m.value for m in missing)}"
        )


_check_exhaustive()


def coerce_role(scope_kind: ScopeKind, role: Role):
    """
    Convert a role value to the enum of the given scope kind.

    Raises ValueError for values outside that scope's enumeration
    (e.g. "admin" at channel scope). Unknown roles are never coerced.
    """
    return ROLE_TYPES[ScopeKind(scope_kind)](role)


def rank(scope_kind: ScopeKind, role: Role) -> int:
    """Ordinal rank of a role at the given scope kind (higher is stronger)"""
    return ROLE_RANKS[ScopeKind(scope_kind)][coerce_role(scope_kind, role)]


def satisfies(actual_role: Role, required_role: Role, scope_kind: ScopeKind) -> bool:
    """True when actual_role ranks at or above required_role"""
    return rank(scope_kind, actual_role) >= rank(scope_kind, required_role)


def top_role(scope_kind: ScopeKind):
    """Highest ranked role of a scope kind (the role that must never vanish)"""
    ranks = ROLE_RANKS[ScopeKind(scope_kind)]
    return max(ranks, key=ranks.get)


def max_role(scope_kind: ScopeKind, *roles: Role):
    """Highest ranked of the given roles; None values are ignored"""
    candidates = [coerce_role(scope_kind, r) for r in roles if r is not None]
    if not candidates:
        return None
    return max(candidates, key=lambda r: rank(scope_kind, r))


def implied_channel_role(teamspace_role: Role) -> ChannelRole:
    return IMPLIED_CHANNEL_ROLES[TeamspaceRole(teamspace_role)]
