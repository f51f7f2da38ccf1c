"""
Token issuing and password hashing.

Tokens are HS256 JWTs signed with JWT_SECRET and carry the payload
{userId, email, role}. Passwords are stored as bcrypt hashes.

NEVER log passwords, hashes, or tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from backend.config import settings
from backend.utils.logging import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of the input
MAX_PASSWORD_BYTES = 72


class AuthConfigurationError(RuntimeError):
    """Raised when JWT_SECRET is missing."""


def _get_secret() -> str:
    if not settings.JWT_SECRET:
        raise AuthConfigurationError(
            "JWT_SECRET is not configured. Refusing to sign or verify tokens."
        )
    return settings.JWT_SECRET


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    expires_in: Optional[timedelta] = None,
) -> str:
    """
    Sign an access token for the given user.

    Args:
        user_id: User UUID (stored in the 'userId' claim)
        email: User email
        role: ADMIN or MEMBER
        expires_in: Token lifetime (defaults to JWT_EXPIRES_DAYS)

    Returns:
        Encoded JWT string

    Raises:
        AuthConfigurationError: If JWT_SECRET is not set
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_in or timedelta(days=settings.JWT_EXPIRES_DAYS)

    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + lifetime,
    }

    return jwt.encode(payload, _get_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of a token and return its payload.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or the signature is wrong
        AuthConfigurationError: If JWT_SECRET is not set
    """
    return jwt.decode(
        token,
        _get_secret(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp"]},
    )


def hash_password(password: str) -> str:
    """
    Hash a plain password with bcrypt.

    Raises:
        ValueError: If the password is longer than bcrypt can represent
    """
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    if not hashed:
        return False

    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False

    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password is not a valid bcrypt hash")
        return False
