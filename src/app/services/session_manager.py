"""
Session Manager

Issues, validates and invalidates opaque session tokens. Tokens are stored
server-side keyed by HMAC-SHA256(SESSION_SECRET, token) so a leaked sessions
table cannot be replayed as cookies.

The manager works inside the caller's unit of work and never commits; the
caller owns the transaction.
"""

import base64
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Session

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"
SESSION_TOKEN_BYTES = 32

# Environments in which the cookie is sent over plain http
INSECURE_ENVIRONMENTS = ("development", "local", "test")


@dataclass(frozen=True)
class IssuedSession:
    token: str
    cookie: str
    session: Session


def generate_session_token() -> str:
    """32 CSPRNG bytes, lowercase base32 without padding"""
    raw = secrets.token_bytes(SESSION_TOKEN_BYTES)
    return base64.b32encode(raw).decode("ascii").lower().rstrip("=")


def hash_session_token(token: str) -> str:
    return hmac.new(
        ApplicationConfig.SESSION_SECRET.encode("utf-8"),
        token.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def session_lifetime() -> timedelta:
    return timedelta(days=ApplicationConfig.SESSION_TTL_DAYS)


def build_session_cookie(token: str, max_age: Optional[int] = None) -> str:
    """Set-Cookie value for the session token"""
    if max_age is None:
        max_age = int(session_lifetime().total_seconds())

    parts = [
        f"{SESSION_COOKIE_NAME}={token}",
        "path=/",
        f"max-age={max_age}",
        "httponly",
        "samesite=lax",
    ]
    if ApplicationConfig.ENVIRONMENT not in INSECURE_ENVIRONMENTS:
        parts.append("secure")
    return "; ".join(parts)


def build_blank_session_cookie() -> str:
    """Set-Cookie value that makes the browser drop the session"""
    return build_session_cookie("", max_age=0)


def parse_session_token(cookie_header: Optional[str]) -> Optional[str]:
    """Extract the session token from a raw Cookie header"""
    if not cookie_header:
        return None

    prefix = f"{SESSION_COOKIE_NAME}="
    for cookie in cookie_header.split(";"):
        cookie = cookie.strip()
        if cookie.startswith(prefix):
            return cookie[len(prefix):] or None
    return None


class SessionManager:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def issue(self, user_id: UUID) -> IssuedSession:
        """Create a session row for the user and return the token and cookie"""
        token = generate_session_token()
        session = Session(
            id=hash_session_token(token),
            user_id=user_id,
            expires_at=datetime.utcnow() + session_lifetime(),
        )
        session = await self.uow.sessions.create(session)
        return IssuedSession(token=token, cookie=build_session_cookie(token), session=session)

    async def validate(self, token: Optional[str]) -> Optional[UUID]:
        """
        Resolve a session token to its user id.

        Fails closed: a missing token, an unknown or expired session, or a
        store error all yield None. Expired rows are deleted; sessions close
        to expiry are extended.
        """
        if not token:
            return None

        session_id = hash_session_token(token)
        try:
            session = await self.uow.sessions.get_by_id(session_id)
            if session is None:
                return None

            now = datetime.utcnow()
            if now >= session.expires_at:
                await self.uow.sessions.delete_by_id(session_id)
                return None

            renewal_threshold = timedelta(days=ApplicationConfig.SESSION_RENEWAL_DAYS)
            if now >= session.expires_at - renewal_threshold:
                session.expires_at = now + session_lifetime()
                await self.uow.sessions.update(session)

            return session.user_id
        except SQLAlchemyError as exc:
            logger.error(f"Session lookup failed, treating as unauthenticated: {exc}")
            return None

    async def invalidate(self, token: str) -> bool:
        return await self.uow.sessions.delete_by_id(hash_session_token(token))

    async def invalidate_all_except(self, user_id: UUID, token: str) -> int:
        return await self.uow.sessions.delete_all_except(user_id, hash_session_token(token))
