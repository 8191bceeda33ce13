"""Password hashing, session tokens and reset tokens."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from designhub.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Bytes of entropy for password-reset tokens (token_urlsafe output is ~1.3x longer).
RESET_TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_session_token(user_id: int, open_id: str, role: str, user_type: str) -> str:
    """Create a signed session token with sub (user id), uid, role, user_type and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(days=settings.SESSION_EXPIRE_DAYS)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "uid": open_id,
        "role": role,
        "user_type": user_type,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.SESSION_SECRET.get_secret_value(),
        algorithm=settings.SESSION_ALGORITHM,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token; return its payload.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        settings.SESSION_SECRET.get_secret_value(),
        algorithms=[settings.SESSION_ALGORITHM],
    )


def generate_reset_token() -> str:
    return secrets.token_urlsafe(RESET_TOKEN_BYTES)


def generate_open_id() -> str:
    """External identifier for locally registered accounts."""
    return f"local-{secrets.token_urlsafe(16)}"
