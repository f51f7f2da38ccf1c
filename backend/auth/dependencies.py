"""
FastAPI dependency functions for authentication and role checks.

Every protected endpoint depends on get_authenticated_user (any role) or
require_admin (ADMIN only). Failure modes:
- missing/malformed/invalid/expired token -> 401
- valid token but wrong role -> 403
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from backend.auth.security import AuthConfigurationError, decode_access_token

logger = logging.getLogger(__name__)

ADMIN_ROLE = "ADMIN"
MEMBER_ROLE = "MEMBER"


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated caller.

    Attributes:
        user_id: The user's UUID from the token's 'userId' claim
        email: Email claim
        role: ADMIN or MEMBER
        access_token: The raw bearer token
    """
    user_id: str
    email: str
    role: str
    access_token: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Verify the bearer token and return the caller's identity.

    Args:
        authorization: Authorization header value

    Returns:
        AuthenticatedUser built from the token payload

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Usage:
        @router.get("/events")
        async def list_events(
            auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
        ):
            ...
    """
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    # Extract token from "Bearer <token>" format
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized("unauthorized", "Invalid Authorization header format")

    token = parts[1]

    try:
        payload = decode_access_token(token)

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except AuthConfigurationError as e:
        logger.error(str(e))
        raise _unauthorized("unauthorized", "Token verification failed")

    user_id = payload.get("userId")
    role = payload.get("role")

    if not user_id or role not in (ADMIN_ROLE, MEMBER_ROLE):
        logger.error("Token payload missing 'userId' or valid 'role' claim")
        raise _unauthorized("invalid_token", "Invalid token: missing user identity")

    logger.debug(f"Token verified for user_id={user_id} role={role}")

    return AuthenticatedUser(
        user_id=str(user_id),
        email=str(payload.get("email") or ""),
        role=str(role),
        access_token=token,
    )


async def require_admin(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> AuthenticatedUser:
    """
    Allow only ADMIN callers.

    Raises:
        HTTPException: 403 if the authenticated user is not an admin
    """
    if not auth_user.is_admin:
        logger.warning(f"Forbidden: user_id={auth_user.user_id} role={auth_user.role}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "details": "Admin access required"}
        )
    return auth_user


CurrentUser = Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
AdminUser = Annotated[AuthenticatedUser, Depends(require_admin)]
