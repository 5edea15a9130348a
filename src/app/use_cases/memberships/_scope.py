"""
Helpers shared by the membership use cases.

Teamspace and channel memberships have the same shape; these helpers pick
the right repository and role enum for a scope so the use cases stay
scope-generic.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result
from src.app.services.access_resolver import EffectiveAccessResolver, EffectiveRole
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ChannelRole, ScopeKind, TeamspaceRole
from src.domain.roles import top_role

LAST_OWNER = Error(
    "CANNOT_REMOVE_LAST_OWNER",
    "Every teamspace and channel must keep at least one owner",
)


async def require_manager(
    uow: UnitOfWork, actor_id: UUID, teamspace_slug: str, channel_slug: Optional[str]
) -> Result[EffectiveRole]:
    """Teamspace members are managed by admins, channel members by channel owners"""
    required = ChannelRole.owner if channel_slug else TeamspaceRole.admin
    return await EffectiveAccessResolver(uow).require(
        actor_id, required, teamspace_slug, channel_slug
    )


async def get_membership(uow: UnitOfWork, scope: EffectiveRole, user_id: UUID):
    if scope.scope_kind == ScopeKind.channel:
        return await uow.channel_memberships.get_by_user_and_channel(user_id, scope.channel.id)
    return await uow.teamspace_memberships.get_by_user_and_teamspace(user_id, scope.teamspace.id)


async def count_owners(uow: UnitOfWork, scope: EffectiveRole) -> int:
    """Owner rows of the scope, locked until the caller's transaction ends"""
    owner = top_role(scope.scope_kind)
    if scope.scope_kind == ScopeKind.channel:
        repository, scope_id = uow.channel_memberships, scope.channel.id
    else:
        repository, scope_id = uow.teamspace_memberships, scope.teamspace.id
    return await repository.count_by_role(scope_id, owner, for_update=True)


def memberships_repository(uow: UnitOfWork, scope: EffectiveRole):
    if scope.scope_kind == ScopeKind.channel:
        return uow.channel_memberships
    return uow.teamspace_memberships


def can_touch_owners(scope: EffectiveRole) -> bool:
    """
    Only teamspace owners may grant, demote or remove a teamspace owner.
    At channel scope the manager is already an effective channel owner.
    """
    if scope.scope_kind == ScopeKind.channel:
        return True
    return scope.teamspace_role == TeamspaceRole.owner


def ensure_keeps_owner(
    scope: EffectiveRole, current_role, owner_count: int, new_role=None
) -> Optional[Error]:
    owner = top_role(scope.scope_kind)
    if current_role == owner and new_role != owner and owner_count <= 1:
        return LAST_OWNER
    return None


def audit_scope(scope: EffectiveRole) -> dict:
    return {
        "scope": scope.scope_kind.value,
        "channel_id": str(scope.channel.id) if scope.channel else None,
    }
