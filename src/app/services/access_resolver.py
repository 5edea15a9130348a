"""
Effective Access Resolver

The one place where teamspace -> channel inheritance is computed. Route
guards and use cases ask this resolver; none of them re-derive roles.

Rules:
- No teamspace membership means no access, whatever channel rows exist.
- Effective channel role = max(direct channel role, role implied by the
  teamspace role). Teamspace owner/admin implies channel owner, editor
  implies editor, viewer implies viewer.
"""

from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    Channel,
    ChannelMembership,
    ChannelRole,
    ScopeKind,
    Teamspace,
    TeamspaceRole,
)
from src.domain.roles import implied_channel_role, max_role, satisfies

# Single outcome for "does not exist" and "exists but not for you"
NOT_FOUND = Error("NOT_FOUND", "Resource not found")


@dataclass(frozen=True)
class EffectiveRole:
    teamspace: Teamspace
    teamspace_role: TeamspaceRole
    channel: Optional[Channel] = None
    channel_role: Optional[ChannelRole] = None
    channel_membership: Optional[ChannelMembership] = None

    @property
    def scope_kind(self) -> ScopeKind:
        return ScopeKind.channel if self.channel is not None else ScopeKind.teamspace

    @property
    def role(self) -> Union[TeamspaceRole, ChannelRole]:
        """Role at the most specific scope that was resolved"""
        if self.channel is not None:
            return self.channel_role
        return self.teamspace_role

    def satisfies(self, required_role: Union[TeamspaceRole, ChannelRole, str]) -> bool:
        return satisfies(self.role, required_role, self.scope_kind)


def effective_channel_role(
    teamspace_role: TeamspaceRole, direct_role: Optional[ChannelRole]
) -> ChannelRole:
    return max_role(ScopeKind.channel, direct_role, implied_channel_role(teamspace_role))


class EffectiveAccessResolver:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def resolve(
        self, user_id: UUID, teamspace_slug: str, channel_slug: Optional[str] = None
    ) -> Optional[EffectiveRole]:
        teamspace = await self.uow.teamspaces.get_by_slug(teamspace_slug)
        if teamspace is None:
            return None

        ts_membership = await self.uow.teamspace_memberships.get_by_user_and_teamspace(
            user_id, teamspace.id
        )
        if ts_membership is None:
            return None

        if channel_slug is None:
            return EffectiveRole(teamspace=teamspace, teamspace_role=ts_membership.role)

        channel = await self.uow.channels.get_by_slug(teamspace.id, channel_slug)
        if channel is None:
            return None

        ch_membership = await self.uow.channel_memberships.get_by_user_and_channel(
            user_id, channel.id
        )
        direct_role = ch_membership.role if ch_membership else None

        return EffectiveRole(
            teamspace=teamspace,
            teamspace_role=ts_membership.role,
            channel=channel,
            channel_role=effective_channel_role(ts_membership.role, direct_role),
            channel_membership=ch_membership,
        )

    async def require(
        self,
        user_id: UUID,
        required_role: Union[TeamspaceRole, ChannelRole, str],
        teamspace_slug: str,
        channel_slug: Optional[str] = None,
    ) -> Result[EffectiveRole]:
        """
        Resolve and check the role in one step.

        Missing scope, missing membership and insufficient rank all return
        the same NOT_FOUND error.
        """
        effective = await self.resolve(user_id, teamspace_slug, channel_slug)
        if effective is None or not effective.satisfies(required_role):
            return Return.err(NOT_FOUND)
        return Return.ok(effective)
