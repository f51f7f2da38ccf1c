"""
User management API endpoints (ADMIN only).

Every endpoint in this router requires an ADMIN token; members can only
see themselves through GET /auth/me.
"""

import logging

from fastapi import APIRouter, status

from backend.auth.dependencies import AdminUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.common import MessageResponse
from backend.schemas.users import (
    UserCreateRequest,
    UserDetailResponse,
    UserListResponse,
    UserMutationResponse,
    UserResponse,
    UserUpdateRequest,
)
from backend.services.user_service import (
    DuplicateEmailError,
    create_user,
    delete_user,
    get_user_by_id,
    list_users,
    update_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse, summary="List all users")
async def list_all_users(auth_user: AdminUser) -> UserListResponse:
    supabase_client = get_supabase_client()

    try:
        users = await list_users(supabase_client)
    except Exception as e:
        logger.error(f"Failed to fetch users: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve users")

    return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=UserDetailResponse, summary="Get a user")
async def get_user(user_id: str, auth_user: AdminUser) -> UserDetailResponse:
    supabase_client = get_supabase_client()

    try:
        user = await get_user_by_id(supabase_client, user_id)
    except Exception as e:
        logger.error(f"Failed to fetch user {user_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve user")

    if user is None:
        raise not_found("User", user_id)

    return UserDetailResponse(user=UserResponse.model_validate(user))


@router.post(
    "",
    response_model=UserMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user_record(
    request: UserCreateRequest,
    auth_user: AdminUser,
) -> UserMutationResponse:
    """
    Create a user on behalf of the ministry.

    Without a password the account exists (and can be scheduled, grouped,
    marked present) but cannot log in until an admin sets one.
    """
    logger.info(f"Admin {auth_user.user_id} creating user with role={request.role}")

    supabase_client = get_supabase_client()

    try:
        user = await create_user(
            supabase_client,
            name=request.name,
            email=str(request.email),
            role=request.role,
            password=request.password,
            birth_date=request.birth_date,
            photo_url=request.photo_url,
            phone=request.phone,
        )
    except DuplicateEmailError as e:
        raise bad_request(str(e), error="email_in_use")
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to create user: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create user")

    return UserMutationResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user),
    )


@router.put("/{user_id}", response_model=UserMutationResponse, summary="Update a user")
async def update_user_record(
    user_id: str,
    request: UserUpdateRequest,
    auth_user: AdminUser,
) -> UserMutationResponse:
    supabase_client = get_supabase_client()

    changes = request.to_row(exclude_unset=True)

    try:
        user = await update_user(supabase_client, user_id, changes)
    except DuplicateEmailError as e:
        raise bad_request(str(e), error="email_in_use")
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to update user {user_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update user")

    if user is None:
        raise not_found("User", user_id)

    return UserMutationResponse(
        message="User updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user_record(user_id: str, auth_user: AdminUser) -> MessageResponse:
    """
    Delete a user account.

    Existence is checked first (404), then self-deletion is refused (400).
    """
    supabase_client = get_supabase_client()

    try:
        existing = await get_user_by_id(supabase_client, user_id)
    except Exception as e:
        logger.error(f"Failed to fetch user {user_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve user")

    if existing is None:
        raise not_found("User", user_id)

    if user_id == auth_user.user_id:
        logger.warning(f"Admin {auth_user.user_id} attempted to delete their own account")
        raise bad_request("Cannot delete your own account", error="cannot_delete_self")

    try:
        await delete_user(supabase_client, user_id)
    except Exception as e:
        logger.error(f"Failed to delete user {user_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete user")

    logger.info(f"User {user_id} deleted by admin {auth_user.user_id}")
    return MessageResponse(message="User deleted successfully")
