from fastapi import APIRouter, Depends, status

from libs.result import Result
from src.api.error import ClientError, ServerError
from src.app.services.access_resolver import NOT_FOUND
from src.app.services.deployment import implied_teamspace_slug
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.access import EffectiveRoleResponse, GetEffectiveRoleUseCase
from src.depends import CurrentSession, get_current_user, get_unit_of_work

router = APIRouter(tags=["Access"])


def _unwrap(result: Result[EffectiveRoleResponse]) -> EffectiveRoleResponse:
    """Unknown scope and no access both answer 404"""
    if result.is_err():
        error = result.error
        if error.code == "NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)
    return result.value


@router.get(
    "/t/{teamspace_slug}/access",
    status_code=status.HTTP_200_OK,
    response_model=EffectiveRoleResponse,
)
async def teamspace_access(
    teamspace_slug: str,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Caller's role in a teamspace"""
    return _unwrap(await GetEffectiveRoleUseCase(uow).execute(current.user_id, teamspace_slug))


@router.get(
    "/t/{teamspace_slug}/c/{channel_slug}/access",
    status_code=status.HTTP_200_OK,
    response_model=EffectiveRoleResponse,
)
async def channel_access(
    teamspace_slug: str,
    channel_slug: str,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Caller's effective role in a channel"""
    return _unwrap(
        await GetEffectiveRoleUseCase(uow).execute(current.user_id, teamspace_slug, channel_slug)
    )


@router.get(
    "/c/{channel_slug}/access",
    status_code=status.HTTP_200_OK,
    response_model=EffectiveRoleResponse,
)
async def single_tenant_channel_access(
    channel_slug: str,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Caller's effective role in a channel of the implied teamspace

    Raises:
        - 404 Not Found: Multi-tenant deployment, unknown channel or no access
    """
    teamspace_slug = implied_teamspace_slug()
    if teamspace_slug is None:
        raise ClientError(NOT_FOUND, status_code=status.HTTP_404_NOT_FOUND)

    return _unwrap(
        await GetEffectiveRoleUseCase(uow).execute(current.user_id, teamspace_slug, channel_slug)
    )
