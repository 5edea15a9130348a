"""
Logout Use Case
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.session_manager import SessionManager, build_blank_session_cookie
from src.app.services.unit_of_work import UnitOfWork

from .dtos import LogoutResponse


class LogoutUseCase:
    """Deletes the current session; always answers with a blank cookie"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_token: Optional[str]) -> Result[LogoutResponse]:
        if session_token:
            async with self.uow:
                await SessionManager(self.uow).invalidate(session_token)
                await self.uow.commit()

        return Return.ok(
            LogoutResponse(status="logged_out", session_cookie=build_blank_session_cookie())
        )
