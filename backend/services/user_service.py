"""
User persistence service.

RULES:
1. The password column is only ever read by the auth flows
   (get_user_credentials); every other read uses USER_COLUMNS.
2. Emails are stored lower-cased and must be unique.
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from backend.auth.security import hash_password
from backend.schemas.common import utc_now_iso
from backend.services.resource_service import TableService

logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id,name,email,role,birth_date,photo_url,phone,"
    "ministry_entry_date,created_at,updated_at"
)

users_table = TableService("users", select=USER_COLUMNS, order=(("name", False),))


class DuplicateEmailError(ValueError):
    """Raised when an email is already used by another account."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def email_in_use(
    supabase_client: Client,
    email: str,
    exclude_user_id: Optional[str] = None,
) -> bool:
    query = (
        supabase_client.table("users")
        .select("id")
        .eq("email", normalize_email(email))
    )
    if exclude_user_id:
        query = query.neq("id", exclude_user_id)

    result = query.limit(1).execute()
    return bool(result.data)


async def get_user_credentials(
    supabase_client: Client,
    email: str,
) -> Optional[Dict[str, Any]]:
    """
    Fetch a user row including the password hash, for login only.

    Returns:
        The user row with 'password', or None if no user has this email
    """
    result = (
        supabase_client.table("users")
        .select(f"{USER_COLUMNS},password")
        .eq("email", normalize_email(email))
        .limit(1)
        .execute()
    )

    if not result.data:
        return None
    return cast(Dict[str, Any], result.data[0])


async def get_password_hash(supabase_client: Client, user_id: str) -> tuple[bool, Optional[str]]:
    """
    Return (exists, password_hash) for a user id.
    """
    result = (
        supabase_client.table("users")
        .select("id,password")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )

    if not result.data:
        return False, None
    row = cast(Dict[str, Any], result.data[0])
    return True, row.get("password")


async def list_users(supabase_client: Client) -> List[Dict[str, Any]]:
    """All users ordered by name."""
    users = await users_table.list(supabase_client)
    logger.info(f"Fetched {len(users)} users")
    return users


async def get_user_by_id(supabase_client: Client, user_id: str) -> Optional[Dict[str, Any]]:
    return await users_table.get(supabase_client, user_id)


async def create_user(
    supabase_client: Client,
    name: str,
    email: str,
    role: str = "MEMBER",
    password: Optional[str] = None,
    birth_date: Optional[str] = None,
    photo_url: Optional[str] = None,
    phone: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a user account.

    Args:
        password: Plain password; hashed with bcrypt before storage.
            None creates an account that cannot log in yet.

    Returns:
        The created user (without password)

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    if await email_in_use(supabase_client, email):
        raise DuplicateEmailError("Email already in use")

    data = {
        "name": name.strip(),
        "email": normalize_email(email),
        "role": role,
        "password": hash_password(password) if password else None,
        "birth_date": birth_date or None,
        "photo_url": photo_url or None,
        "phone": phone or None,
        "ministry_entry_date": utc_now_iso(),
    }

    created = await users_table.create(supabase_client, data)
    created.pop("password", None)

    logger.info(f"User created: id={created.get('id')} role={role}")
    return created


async def update_user(
    supabase_client: Client,
    user_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Apply a partial update to a user.

    Args:
        changes: snake_case fields to write. A 'password' entry is hashed.
            Empty strings on optional profile fields are stored as NULL.

    Returns:
        The updated user, the unchanged user when `changes` is empty,
        or None if the user does not exist

    Raises:
        DuplicateEmailError: If the new email belongs to another user
    """
    existing = await users_table.get(supabase_client, user_id)
    if existing is None:
        return None

    if not changes:
        return existing

    data = dict(changes)

    if "email" in data and data["email"] is not None:
        data["email"] = normalize_email(data["email"])
        if data["email"] != existing.get("email") and await email_in_use(
            supabase_client, data["email"], exclude_user_id=user_id
        ):
            raise DuplicateEmailError("Email already in use by another user")

    for optional_field in ("birth_date", "photo_url", "phone"):
        if optional_field in data and not data[optional_field]:
            data[optional_field] = None

    if data.get("password"):
        data["password"] = hash_password(data["password"])
    else:
        data.pop("password", None)

    updated = await users_table.update(supabase_client, user_id, data)
    if updated is None:
        return None

    # PATCH returns every column; drop the hash before it leaves the service
    updated.pop("password", None)
    return updated


async def set_password(supabase_client: Client, user_id: str, new_password: str) -> None:
    await users_table.update(
        supabase_client,
        user_id,
        {"password": hash_password(new_password)},
    )
    logger.info(f"Password changed for user_id={user_id}")


async def delete_user(supabase_client: Client, user_id: str) -> bool:
    return await users_table.delete(supabase_client, user_id)
