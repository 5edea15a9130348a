from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.setup import (
    CompleteSetupUseCase,
    GetSetupStatusUseCase,
    SetupCommand,
    SetupStatusResponse,
)
from src.depends import get_unit_of_work

router = APIRouter(prefix="/setup", tags=["Setup"])

SETUP_ERROR_STATUS = {
    "SETUP_ALREADY_COMPLETED": status.HTTP_403_FORBIDDEN,
    "SETUP_REQUIREMENTS_NOT_MET": status.HTTP_412_PRECONDITION_FAILED,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "USERS_ALREADY_EXIST": status.HTTP_409_CONFLICT,
}


class SetupRequest(BaseModel):
    """
    First-run setup HTTP request payload
    """

    email: EmailStr = Field(..., description="Owner email address")
    password: str = Field(..., description="Owner password (8 characters to 72 bytes)")
    name: Optional[str] = Field(None, max_length=100, description="Owner display name")
    teamspace_name: str = Field("Workspace", min_length=1, max_length=255)
    channel_name: str = Field("My Channel", min_length=1, max_length=255)


class SetupResponse(BaseModel):
    user_id: str
    email: str
    teamspace_slug: str
    channel_slug: str


@router.get("/status", status_code=status.HTTP_200_OK, response_model=SetupStatusResponse)
async def setup_status():
    """Whether first-run setup has been completed"""
    result = await GetSetupStatusUseCase().execute()
    return result.value


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SetupResponse)
async def complete_setup(
    request: SetupRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    First-run setup

    Creates the owner account, the first teamspace and a default channel,
    then signs the owner in. Succeeds at most once per deployment.

    Raises:
        - 400 Bad Request: Password rejected by the password policy
        - 403 Forbidden: Setup already completed
        - 409 Conflict: Users already exist
        - 412 Precondition Failed: Deployment requirements missing
        - 500 Internal Server Error: Completion flag could not be written
    """
    command = SetupCommand(
        email=request.email,
        password=request.password,
        name=request.name,
        teamspace_name=request.teamspace_name,
        channel_name=request.channel_name,
    )

    result = await CompleteSetupUseCase(uow).execute(command)

    if result.is_err():
        error = result.error
        if error.code in SETUP_ERROR_STATUS:
            raise ClientError(error, status_code=SETUP_ERROR_STATUS[error.code])
        if error.code == "SETUP_FLAG_WRITE_FAILED":
            raise ServerError(error, expose_message=True)
        raise ServerError(error)

    response.headers.append("set-cookie", result.value.session_cookie)
    return SetupResponse(
        user_id=result.value.user_id,
        email=result.value.email,
        teamspace_slug=result.value.teamspace_slug,
        channel_slug=result.value.channel_slug,
    )
