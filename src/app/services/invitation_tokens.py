"""
Invitation token primitives.

Tokens are 32 CSPRNG bytes rendered as 64 lowercase hex characters and are
only ever compared in constant time.
"""

import hmac
import re
import secrets
from datetime import datetime, timedelta

from config import ApplicationConfig

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2
DEFAULT_MAX_ATTEMPTS = 3

_TOKEN_PATTERN = re.compile(r"[0-9a-f]{64}")


def generate_invitation_token() -> str:
    return secrets.token_bytes(TOKEN_BYTES).hex()


def is_well_formed_token(token) -> bool:
    """Cheap syntactic check done before any database round trip"""
    return isinstance(token, str) and _TOKEN_PATTERN.fullmatch(token) is not None


def calculate_invitation_expiry(now: datetime = None) -> datetime:
    now = now or datetime.utcnow()
    return now + timedelta(hours=ApplicationConfig.INVITATION_TTL_HOURS)


def is_invitation_expired(expires_at: datetime, now: datetime = None) -> bool:
    now = now or datetime.utcnow()
    return now > expires_at


def has_exceeded_attempts(attempts: int, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> bool:
    return attempts >= max_attempts


def compare_tokens_constant_time(token_a: str, token_b: str) -> bool:
    """
    Compare two invitation tokens without leaking where they differ.

    The length check short-circuits because token length is public. Both
    tokens are decoded to bytes and compared with hmac.compare_digest.
    """
    if len(token_a) != TOKEN_LENGTH or len(token_b) != TOKEN_LENGTH:
        return False

    try:
        bytes_a = bytes.fromhex(token_a)
        bytes_b = bytes.fromhex(token_b)
    except ValueError:
        return False

    return hmac.compare_digest(bytes_a, bytes_b)
