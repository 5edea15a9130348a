"""
Login Use Case

Handles email/password authentication and issues a session.
"""

import logging
import secrets
from datetime import datetime
from functools import lru_cache

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_password, verify_password
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent

from .dtos import LoginResult, UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password.")


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    """Hash checked against when the email is unknown"""
    return hash_password(secrets.token_hex(16))


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Email lookup is case-insensitive
    - Unknown emails still pay for a bcrypt check (no user enumeration by timing)
    - Unknown email and wrong password give the same error
    - Creates a new session and updates user.last_login_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, password: str) -> Result[LoginResult]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResult containing the session cookie, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())

            if user is None:
                verify_password(_dummy_password_hash(), password)
                logger.warning("Login failed: unknown email")
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(user.password_hash, password):
                logger.warning(f"Login failed for user {user.id}: wrong password")
                return Return.err(INVALID_CREDENTIALS)

            issued = await SessionManager(self.uow).issue(user.id)

            user.last_login_at = datetime.utcnow()
            await self.uow.users.update(user)

            audit = AuditEvent(user_id=user.id, action="auth.login", event_metadata=None)
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                LoginResult(
                    user=UserInfo(id=str(user.id), email=user.email, name=user.name),
                    session_token=issued.token,
                    session_cookie=issued.cookie,
                )
            )
