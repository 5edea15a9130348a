from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.memberships import (
    ChangeMemberRoleUseCase,
    MembershipResponse,
    RemoveMemberUseCase,
)
from src.depends import CurrentSession, get_current_user, get_unit_of_work

router = APIRouter(prefix="/teamspaces/{teamspace_slug}", tags=["Members"])

MEMBERSHIP_ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "MEMBERSHIP_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "CANNOT_REMOVE_LAST_OWNER": status.HTTP_409_CONFLICT,
}


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., description="New role at the target scope")


def _raise(error):
    if error.code in MEMBERSHIP_ERROR_STATUS:
        raise ClientError(error, status_code=MEMBERSHIP_ERROR_STATUS[error.code])
    raise ServerError(error)


@router.patch(
    "/members/{user_id}", status_code=status.HTTP_200_OK, response_model=MembershipResponse
)
async def change_teamspace_role(
    teamspace_slug: str,
    user_id: UUID,
    request: ChangeRoleRequest,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change a member's teamspace role (admins and owners)

    Raises:
        - 400 Bad Request: Not a teamspace role
        - 403 Forbidden: Only owners may grant or change the owner role
        - 404 Not Found: Teamspace or member unknown, or caller not an admin
        - 409 Conflict: Would leave the teamspace without an owner
    """
    result = await ChangeMemberRoleUseCase(uow).execute(
        current.user_id, teamspace_slug, user_id, request.role
    )
    if result.is_err():
        _raise(result.error)
    return result.value


@router.delete(
    "/members/{user_id}", status_code=status.HTTP_200_OK, response_model=MembershipResponse
)
async def remove_teamspace_member(
    teamspace_slug: str,
    user_id: UUID,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Remove a member from the teamspace (admins and owners)

    Raises:
        - 403 Forbidden: Only owners may remove an owner
        - 404 Not Found: Teamspace or member unknown, or caller not an admin
        - 409 Conflict: Would leave the teamspace without an owner
    """
    result = await RemoveMemberUseCase(uow).execute(current.user_id, teamspace_slug, user_id)
    if result.is_err():
        _raise(result.error)
    return result.value


@router.patch(
    "/channels/{channel_slug}/members/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=MembershipResponse,
)
async def change_channel_role(
    teamspace_slug: str,
    channel_slug: str,
    user_id: UUID,
    request: ChangeRoleRequest,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Set a member's direct channel role (channel owners)

    Raises:
        - 400 Bad Request: Not a channel role
        - 404 Not Found: Channel or member unknown, or caller not a channel owner
        - 409 Conflict: Would leave the channel without an owner
    """
    result = await ChangeMemberRoleUseCase(uow).execute(
        current.user_id, teamspace_slug, user_id, request.role, channel_slug=channel_slug
    )
    if result.is_err():
        _raise(result.error)
    return result.value


@router.delete(
    "/channels/{channel_slug}/members/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=MembershipResponse,
)
async def remove_channel_member(
    teamspace_slug: str,
    channel_slug: str,
    user_id: UUID,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Remove a direct channel membership (channel owners)

    Raises:
        - 404 Not Found: Channel or member unknown, or caller not a channel owner
        - 409 Conflict: Would leave the channel without an owner
    """
    result = await RemoveMemberUseCase(uow).execute(
        current.user_id, teamspace_slug, user_id, channel_slug=channel_slug
    )
    if result.is_err():
        _raise(result.error)
    return result.value
