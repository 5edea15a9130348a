from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from libs.result import Error
from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import (
    INVITATION_REJECTION_CODES,
    AcceptInvitationUseCase,
    CreateInvitationResponse,
    CreateInvitationUseCase,
    InvitationDetails,
    ListInvitationsResponse,
    ListInvitationsUseCase,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
    ValidateInvitationUseCase,
)
from src.depends import CurrentSession, get_current_user, get_optional_user, get_unit_of_work

router = APIRouter(tags=["Invitations"])

# Every token rejection looks the same from outside
INVALID_INVITATION = Error("INVALID_INVITATION", "Invalid or expired invitation")


class CreateInvitationRequest(BaseModel):
    """
    Invite HTTP request payload

    role is a teamspace role, or a channel role when channel_slug is set.
    """

    email: EmailStr = Field(..., description="Email address to invite")
    role: str = Field(..., description="Proposed role at the target scope")
    channel_slug: Optional[str] = Field(None, description="Invite to this channel only")


class AcceptInvitationRequest(BaseModel):
    password: Optional[str] = Field(None, description="Password for a new account")
    name: Optional[str] = Field(None, max_length=100, description="Name for a new account")


class AcceptInvitationResponse(BaseModel):
    user_id: str
    email: str
    role: str
    scope: str
    teamspace_slug: str
    channel_slug: Optional[str] = None
    is_new_user: bool


def _raise_token_error(error: Error):
    if error.code in INVITATION_REJECTION_CODES:
        raise ClientError(INVALID_INVITATION, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


@router.get(
    "/invitations/{token}", status_code=status.HTTP_200_OK, response_model=InvitationDetails
)
async def validate_invitation(token: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Check an invitation link

    Raises:
        - 400 Bad Request: Invalid, expired, used, revoked or locked invitation
    """
    result = await ValidateInvitationUseCase(uow).execute(token)

    if result.is_err():
        _raise_token_error(result.error)

    return result.value


@router.post(
    "/invitations/{token}/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    token: str,
    response: Response,
    request: Optional[AcceptInvitationRequest] = None,
    current: Optional[CurrentSession] = Depends(get_optional_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Accept an invitation

    New accounts send a password; existing accounts must be signed in as
    the invited email. Sets the session cookie on success.

    Raises:
        - 400 Bad Request: Invalid or expired invitation, or password rejected
        - 401 Unauthorized: Invitation is for an existing account not signed in
        - 409 Conflict: Already a member
    """
    request = request or AcceptInvitationRequest()

    result = await AcceptInvitationUseCase(uow).execute(
        token,
        password=request.password,
        name=request.name,
        authenticated_user_id=current.user_id if current else None,
    )

    if result.is_err():
        error = result.error
        if error.code == "AUTHENTICATION_REQUIRED":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("PASSWORD_REQUIRED", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ALREADY_MEMBER":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        _raise_token_error(error)

    accepted = result.value
    response.headers.append("set-cookie", accepted.session_cookie)
    return AcceptInvitationResponse(
        user_id=accepted.user_id,
        email=accepted.email,
        role=accepted.role,
        scope=accepted.scope,
        teamspace_slug=accepted.teamspace_slug,
        channel_slug=accepted.channel_slug,
        is_new_user=accepted.is_new_user,
    )


@router.post(
    "/teamspaces/{teamspace_slug}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateInvitationResponse,
)
async def create_invitation(
    teamspace_slug: str,
    request: CreateInvitationRequest,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Invite someone to a teamspace or channel

    Returns the invitation link; delivering it is up to the inviter.

    Raises:
        - 400 Bad Request: Role does not exist at the target scope
        - 401 Unauthorized: Not signed in
        - 403 Forbidden: Role above the inviter's own
        - 404 Not Found: Scope unknown or not manageable by the caller
        - 409 Conflict: Already a member or invitation already pending
    """
    result = await CreateInvitationUseCase(uow).execute(
        current.user_id,
        teamspace_slug,
        request.email,
        request.role,
        channel_slug=request.channel_slug,
    )

    if result.is_err():
        error = result.error
        if error.code == "NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVALID_ROLE":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ROLE_NOT_GRANTABLE":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code in ("ALREADY_MEMBER", "INVITATION_ALREADY_PENDING"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.get(
    "/teamspaces/{teamspace_slug}/invitations",
    status_code=status.HTTP_200_OK,
    response_model=ListInvitationsResponse,
)
async def list_invitations(
    teamspace_slug: str,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Pending invitations of a teamspace (admins and owners)

    Raises:
        - 401 Unauthorized: Not signed in
        - 404 Not Found: Teamspace unknown or caller not an admin
    """
    result = await ListInvitationsUseCase(uow).execute(current.user_id, teamspace_slug)

    if result.is_err():
        error = result.error
        if error.code == "NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.delete(
    "/teamspaces/{teamspace_slug}/invitations/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    teamspace_slug: str,
    invitation_id: UUID,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke a pending invitation

    Raises:
        - 401 Unauthorized: Not signed in
        - 404 Not Found: Invitation unknown or not manageable by the caller
        - 409 Conflict: Invitation already accepted or revoked
    """
    result = await RevokeInvitationUseCase(uow).execute(
        current.user_id, teamspace_slug, invitation_id
    )

    if result.is_err():
        error = result.error
        if error.code == "NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in ("INVITATION_ALREADY_ACCEPTED", "INVITATION_ALREADY_REVOKED"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value
