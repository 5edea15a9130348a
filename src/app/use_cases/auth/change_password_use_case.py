"""
Change Password Use Case

Replaces the password of the signed-in user and signs out their other
sessions.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_password, validate_password, verify_password
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork

from .dtos import ChangePasswordResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing the current user's password.

    Business Rules:
    - Current password must be verified
    - New password must pass the password policy
    - Every session except the current one is invalidated
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        session_token: str,
        current_password: str,
        new_password: str,
    ) -> Result[ChangePasswordResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not verify_password(user.password_hash, current_password):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password is incorrect")
                )

            violations = validate_password(new_password)
            if violations:
                return Return.err(Error("INVALID_PASSWORD", violations[0]))

            user.password_hash = hash_password(new_password)
            await self.uow.users.update(user)

            revoked = await SessionManager(self.uow).invalidate_all_except(
                user.id, session_token
            )

            await self.uow.commit()

            logger.info(f"User {user.id} changed password, {revoked} other sessions revoked")

            return Return.ok(ChangePasswordResponse(status="updated", sessions_revoked=revoked))
