"""
Password policy and hashing.

Length beats complexity: only length bounds and a common-password deny list
are enforced.
"""

from typing import List

import bcrypt

from config import ApplicationConfig

PASSWORD_MIN_LENGTH = 8
# bcrypt refuses inputs longer than 72 bytes
PASSWORD_MAX_BYTES = 72

COMMON_PASSWORDS = frozenset(
    {
        "password",
        "password1",
        "password123",
        "12345678",
        "123456789",
        "1234567890",
        "qwerty123",
        "qwertyuiop",
        "iloveyou",
        "letmein1",
        "welcome1",
        "admin123",
        "abc12345",
        "11111111",
        "sunshine1",
        "football1",
        "baseball1",
        "trustno1",
        "changeme",
        "passw0rd",
    }
)


def validate_password(password: str) -> List[str]:
    """Return the policy violations of a password; empty means valid"""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
    if password.lower() in COMMON_PASSWORDS:
        errors.append("This password is too common. Please choose a different password.")
    return errors


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=ApplicationConfig.BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, AttributeError):
        # Malformed stored hash
        return False
