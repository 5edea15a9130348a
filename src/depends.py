from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.session_manager import SESSION_COOKIE_NAME, SessionManager
from src.app.services.unit_of_work import UnitOfWork

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_database():
    """Create missing tables (SQLite deployments have no migration step)"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@dataclass(frozen=True)
class CurrentSession:
    """Authenticated caller: the user and the token that proved it"""

    user_id: UUID
    token: str


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_optional_user(
    request: Request, uow: UnitOfWork = Depends(get_unit_of_work)
) -> Optional[CurrentSession]:
    """
    Resolve the session cookie, if any.

    Validation may renew or delete the session row, so it commits.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    async with uow:
        user_id = await SessionManager(uow).validate(token)
        await uow.commit()

    if user_id is None:
        return None
    return CurrentSession(user_id=user_id, token=token)


async def get_current_user(
    current: Optional[CurrentSession] = Depends(get_optional_user),
) -> CurrentSession:
    """
    Dependency requiring a valid session cookie.

    Raises:
        ClientError: 401 if the cookie is missing, unknown or expired
    """
    if current is None:
        raise ClientError(
            Error("UNAUTHENTICATED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return current
