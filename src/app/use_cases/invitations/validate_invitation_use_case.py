"""
Validate Invitation Use Case

Checks an invitation token and, when valid, tells the invitee what they were
invited to. Every rejection of a known invitation counts as an attempt.
"""

import logging
from datetime import datetime

from libs.result import Error, Result, Return
from src.app.services.invitation_tokens import (
    compare_tokens_constant_time,
    has_exceeded_attempts,
    is_invitation_expired,
    is_well_formed_token,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Invitation, InvitationStatus

from .dtos import InvitationDetails

logger = logging.getLogger(__name__)

# Internal rejection reasons; callers outside the use case layer collapse
# them into a single "invalid or expired" answer.
INVITATION_MALFORMED = "INVITATION_MALFORMED"
INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
INVITATION_ALREADY_ACCEPTED = "INVITATION_ALREADY_ACCEPTED"
INVITATION_REVOKED = "INVITATION_REVOKED"
INVITATION_LOCKED = "INVITATION_LOCKED"
INVITATION_EXPIRED = "INVITATION_EXPIRED"

INVITATION_REJECTION_CODES = frozenset(
    {
        INVITATION_MALFORMED,
        INVITATION_NOT_FOUND,
        INVITATION_ALREADY_ACCEPTED,
        INVITATION_REVOKED,
        INVITATION_LOCKED,
        INVITATION_EXPIRED,
    }
)


def _rejection(invitation: Invitation, now: datetime):
    if invitation.status == InvitationStatus.accepted:
        return Error(INVITATION_ALREADY_ACCEPTED, "Invitation has already been accepted")
    if invitation.status == InvitationStatus.revoked:
        return Error(INVITATION_REVOKED, "Invitation has been revoked")
    if has_exceeded_attempts(invitation.attempts, invitation.max_attempts):
        return Error(INVITATION_LOCKED, "Invitation is locked after too many attempts")
    if is_invitation_expired(invitation.expires_at, now):
        return Error(INVITATION_EXPIRED, "Invitation has expired")
    return None


async def check_invitation(uow: UnitOfWork, token: str) -> Result[Invitation]:
    """
    Look up and vet an invitation token inside the caller's transaction.

    Malformed tokens are rejected before touching the database. Rejections
    of a stored invitation increment its attempt counter; the caller must
    commit for the increment to persist.
    """
    if not is_well_formed_token(token):
        return Return.err(Error(INVITATION_MALFORMED, "Malformed invitation token"))

    invitation = await uow.invitations.get_by_token(token)
    if invitation is None or not compare_tokens_constant_time(invitation.token, token):
        return Return.err(Error(INVITATION_NOT_FOUND, "Invitation not found"))

    error = _rejection(invitation, datetime.utcnow())
    if error is not None:
        await uow.invitations.increment_attempts(invitation.id)
        logger.warning(f"Invitation {invitation.id} rejected: {error.code}")
        return Return.err(error)

    return Return.ok(invitation)


class ValidateInvitationUseCase:
    """
    Use case for checking an invitation before the invitee accepts it.

    Business Rules:
    - Token must be 64 lowercase hex characters
    - Invitation must be pending, unexpired and under its attempt limit
    - A failed check on a stored invitation counts as an attempt
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[InvitationDetails]:
        async with self.uow:
            checked = await check_invitation(self.uow, token)
            if checked.is_err():
                # Persist the attempt increment, if any
                await self.uow.commit()
                return checked

            invitation = checked.value

            teamspace = await self.uow.teamspaces.get_by_id(invitation.teamspace_id)
            if teamspace is None:
                return Return.err(Error(INVITATION_NOT_FOUND, "Invitation not found"))

            channel = None
            if invitation.channel_id is not None:
                channel = await self.uow.channels.get_by_id(invitation.channel_id)
                if channel is None:
                    return Return.err(Error(INVITATION_NOT_FOUND, "Invitation not found"))

            existing_user = await self.uow.users.get_by_email(invitation.email)

            return Return.ok(
                InvitationDetails(
                    email=invitation.email,
                    role=invitation.role,
                    scope=invitation.scope_kind.value,
                    teamspace_name=teamspace.name,
                    teamspace_slug=teamspace.slug,
                    channel_name=channel.name if channel else None,
                    channel_slug=channel.slug if channel else None,
                    expires_at=invitation.expires_at,
                    account_exists=existing_user is not None,
                )
            )
