from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.channel_membership_repository import IChannelMembershipRepository
from src.app.repositories.channel_repository import IChannelRepository
from src.app.repositories.invitation_repository import IInvitationRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.teamspace_membership_repository import (
    ITeamspaceMembershipRepository,
)
from src.app.repositories.teamspace_repository import ITeamspaceRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """
    Abstract UnitOfWork - defines repository access and transaction management

    Leaving the ``async with`` block without commit() rolls back, so a use
    case that returns early never leaves partial writes behind.
    """

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    teamspaces: ITeamspaceRepository
    channels: IChannelRepository
    teamspace_memberships: ITeamspaceMembershipRepository
    channel_memberships: IChannelMembershipRepository
    sessions: ISessionRepository
    invitations: IInvitationRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
