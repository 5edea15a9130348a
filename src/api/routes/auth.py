from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.services.session_manager import SESSION_COOKIE_NAME
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    CurrentUserResponse,
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    UserInfo,
)
from src.depends import CurrentSession, get_current_user, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class LoginResponse(BaseModel):
    user: UserInfo


class LogoutResponse(BaseModel):
    status: str


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password (8 characters to 72 bytes)")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    User Login

    Verifies email and password and sets the session cookie.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Server error
    """
    result = await LoginUseCase(uow).execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    response.headers.append("set-cookie", result.value.session_cookie)
    return LoginResponse(user=result.value.user)


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    User Logout

    Deletes the current session (if any) and clears the cookie.
    """
    result = await LogoutUseCase(uow).execute(request.cookies.get(SESSION_COOKIE_NAME))

    response.headers.append("set-cookie", result.value.session_cookie)
    return LogoutResponse(status=result.value.status)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=CurrentUserResponse)
async def get_me(
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current user and the teamspaces they belong to

    Raises:
        - 401 Unauthorized: Missing or invalid session
        - 500 Internal Server Error: Server error
    """
    result = await GetCurrentUserUseCase(uow).execute(current.user_id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.post(
    "/change-password", status_code=status.HTTP_200_OK, response_model=ChangePasswordResponse
)
async def change_password(
    request: ChangePasswordRequest,
    current: CurrentSession = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change password

    Signs out every other session of the user; the current one stays valid.

    Raises:
        - 400 Bad Request: New password rejected by the password policy
        - 401 Unauthorized: Missing session or wrong current password
        - 500 Internal Server Error: Server error
    """
    result = await ChangePasswordUseCase(uow).execute(
        current.user_id, current.token, request.current_password, request.new_password
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_CREDENTIALS", "USER_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "INVALID_PASSWORD":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
