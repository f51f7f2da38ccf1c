"""
Auth API endpoints.

- POST /auth/register        - Self-service sign-up (MEMBER role)
- POST /auth/login           - Exchange email/password for a token
- GET  /auth/me              - Current user
- POST /auth/change-password - Change the caller's own password

Register and login are the only endpoints that accept requests without a
bearer token.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from backend.auth.dependencies import CurrentUser
from backend.auth.security import AuthConfigurationError
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.auth import AuthResponse, ChangePasswordRequest, LoginRequest, RegisterRequest
from backend.schemas.common import MessageResponse
from backend.schemas.users import UserDetailResponse, UserResponse
from backend.services.auth_service import (
    InvalidCredentialsError,
    PasswordChangeError,
    change_password,
    login_user,
    register_user,
)
from backend.services.user_service import DuplicateEmailError, get_user_by_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new member account",
)
async def register(request: RegisterRequest) -> AuthResponse:
    """
    Create a MEMBER account and return a signed token.

    Returns 400 when the email is already in use.
    """
    supabase_client = get_supabase_client()

    try:
        token, user = await register_user(
            supabase_client,
            name=request.name,
            email=str(request.email),
            password=request.password,
        )
    except DuplicateEmailError as e:
        raise bad_request(str(e), error="email_in_use")
    except ValueError as e:
        raise bad_request(str(e))
    except AuthConfigurationError as e:
        logger.error(str(e))
        raise server_error("configuration_error", "Token signing is not configured")
    except Exception as e:
        logger.error(f"Failed to register user: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create account")

    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in with email and password",
)
async def login(request: LoginRequest) -> AuthResponse:
    supabase_client = get_supabase_client()

    try:
        token, user = await login_user(supabase_client, request.email, request.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_credentials", "details": "Invalid email or password"}
        )
    except AuthConfigurationError as e:
        logger.error(str(e))
        raise server_error("configuration_error", "Token signing is not configured")
    except Exception as e:
        logger.error(f"Login failed unexpectedly: {e}", exc_info=True)
        raise server_error("login_error", "Failed to log in")

    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get(
    "/me",
    response_model=UserDetailResponse,
    summary="Get the authenticated user",
)
async def get_me(auth_user: CurrentUser) -> UserDetailResponse:
    """
    Return the caller's profile.

    The token may outlive the account; a deleted user gets 404.
    """
    supabase_client = get_supabase_client()

    try:
        user = await get_user_by_id(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to fetch user {auth_user.user_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve user")

    if user is None:
        raise not_found("User", auth_user.user_id)

    return UserDetailResponse(user=UserResponse.model_validate(user))


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change the caller's password",
)
async def change_own_password(
    request: ChangePasswordRequest,
    auth_user: CurrentUser,
) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        changed = await change_password(
            supabase_client,
            user_id=auth_user.user_id,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    except PasswordChangeError as e:
        raise bad_request(str(e))
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to change password for {auth_user.user_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to change password")

    if not changed:
        raise not_found("User", auth_user.user_id)

    return MessageResponse(message="Password changed successfully")
