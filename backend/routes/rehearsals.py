"""
Rehearsal CRUD API endpoints.
"""

import logging

from fastapi import APIRouter, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import not_found, server_error
from backend.schemas.common import MessageResponse
from backend.schemas.rehearsals import (
    RehearsalCreateRequest,
    RehearsalDetailResponse,
    RehearsalListResponse,
    RehearsalMutationResponse,
    RehearsalResponse,
    RehearsalUpdateRequest,
)
from backend.services.rehearsal_service import (
    create_rehearsal,
    delete_rehearsal,
    get_rehearsal_by_id,
    list_rehearsals,
    update_rehearsal,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rehearsals", tags=["rehearsals"])


@router.get("", response_model=RehearsalListResponse, summary="List rehearsals")
async def list_all_rehearsals(auth_user: CurrentUser) -> RehearsalListResponse:
    """Most recent rehearsals first."""
    supabase_client = get_supabase_client()

    try:
        rehearsals = await list_rehearsals(supabase_client)
    except Exception as e:
        logger.error(f"Failed to fetch rehearsals: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch rehearsals")

    return RehearsalListResponse(rehearsals=[RehearsalResponse.model_validate(r) for r in rehearsals])


@router.get("/{rehearsal_id}", response_model=RehearsalDetailResponse, summary="Get a rehearsal")
async def get_rehearsal(rehearsal_id: str, auth_user: CurrentUser) -> RehearsalDetailResponse:
    supabase_client = get_supabase_client()

    try:
        rehearsal = await get_rehearsal_by_id(supabase_client, rehearsal_id)
    except Exception as e:
        logger.error(f"Failed to fetch rehearsal {rehearsal_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch rehearsal")

    if rehearsal is None:
        raise not_found("Rehearsal", rehearsal_id)

    return RehearsalDetailResponse(rehearsal=RehearsalResponse.model_validate(rehearsal))


@router.post(
    "",
    response_model=RehearsalMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a rehearsal",
)
async def create_rehearsal_record(
    request: RehearsalCreateRequest,
    auth_user: AdminUser,
) -> RehearsalMutationResponse:
    supabase_client = get_supabase_client()

    try:
        rehearsal = await create_rehearsal(supabase_client, auth_user.user_id, request.to_row())
    except Exception as e:
        logger.error(f"Failed to create rehearsal: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create rehearsal")

    return RehearsalMutationResponse(
        message="Rehearsal created successfully",
        rehearsal=RehearsalResponse.model_validate(rehearsal),
    )


@router.put("/{rehearsal_id}", response_model=RehearsalMutationResponse, summary="Update a rehearsal")
async def update_rehearsal_record(
    rehearsal_id: str,
    request: RehearsalUpdateRequest,
    auth_user: AdminUser,
) -> RehearsalMutationResponse:
    supabase_client = get_supabase_client()

    try:
        rehearsal = await update_rehearsal(
            supabase_client,
            rehearsal_id,
            request.to_row(exclude_unset=True),
        )
    except Exception as e:
        logger.error(f"Failed to update rehearsal {rehearsal_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update rehearsal")

    if rehearsal is None:
        raise not_found("Rehearsal", rehearsal_id)

    return RehearsalMutationResponse(
        message="Rehearsal updated successfully",
        rehearsal=RehearsalResponse.model_validate(rehearsal),
    )


@router.delete("/{rehearsal_id}", response_model=MessageResponse, summary="Delete a rehearsal")
async def delete_rehearsal_record(rehearsal_id: str, auth_user: AdminUser) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_rehearsal(supabase_client, rehearsal_id)
    except Exception as e:
        logger.error(f"Failed to delete rehearsal {rehearsal_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete rehearsal")

    if not deleted:
        raise not_found("Rehearsal", rehearsal_id)

    return MessageResponse(message="Rehearsal deleted successfully")
