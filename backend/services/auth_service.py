"""
Account flows: register, login, change password.

Credential failures are reported with a single generic message so callers
cannot tell an unknown email from a wrong password.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from supabase import Client

from backend.auth.security import create_access_token, verify_password
from backend.services import user_service

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Email/password pair did not match an account."""


class PasswordChangeError(ValueError):
    """Password change request could not be honoured."""


def issue_token(user: Dict[str, Any]) -> str:
    return create_access_token(
        user_id=str(user["id"]),
        email=str(user.get("email") or ""),
        role=str(user.get("role") or "MEMBER"),
    )


async def register_user(
    supabase_client: Client,
    name: str,
    email: str,
    password: str,
) -> Tuple[str, Dict[str, Any]]:
    """
    Create a MEMBER account and sign a token for it.

    Returns:
        (token, user)

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    user = await user_service.create_user(
        supabase_client,
        name=name,
        email=email,
        role="MEMBER",
        password=password,
    )
    return issue_token(user), user


async def login_user(
    supabase_client: Client,
    email: str,
    password: str,
) -> Tuple[str, Dict[str, Any]]:
    """
    Verify credentials and sign a token.

    Raises:
        InvalidCredentialsError: Unknown email, no password set, or wrong password
    """
    row: Optional[Dict[str, Any]] = await user_service.get_user_credentials(supabase_client, email)

    if row is None:
        logger.info("Login rejected: unknown email")
        raise InvalidCredentialsError()

    password_hash = row.pop("password", None)
    if not verify_password(password, password_hash):
        logger.info(f"Login rejected for user_id={row.get('id')}")
        raise InvalidCredentialsError()

    logger.info(f"Login succeeded for user_id={row.get('id')}")
    return issue_token(row), row


async def change_password(
    supabase_client: Client,
    user_id: str,
    current_password: str,
    new_password: str,
) -> bool:
    """
    Replace the caller's password after checking the current one.

    Returns:
        False if the user no longer exists, True on success

    Raises:
        PasswordChangeError: No password set yet, or current password is wrong
    """
    exists, password_hash = await user_service.get_password_hash(supabase_client, user_id)
    if not exists:
        return False

    if not password_hash:
        raise PasswordChangeError(
            "User has no password set. Ask an administrator to set one first."
        )

    if not verify_password(current_password, password_hash):
        raise PasswordChangeError("Current password is incorrect")

    await user_service.set_password(supabase_client, user_id, new_password)
    return True
