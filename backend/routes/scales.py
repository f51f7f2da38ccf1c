"""
Scale (weekly roster) API endpoints.

Any authenticated user can list scales and mark their own assignment as
viewed; creating, editing and deleting scales requires ADMIN.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.common import SuccessResponse
from backend.schemas.scales import (
    ScaleCreateRequest,
    ScaleListResponse,
    ScaleMutationResponse,
    ScaleResponse,
    ScaleUpdateRequest,
)
from backend.services.scale_service import (
    create_scale,
    delete_scale,
    list_scales,
    mark_scale_viewed,
    update_scale,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scales", tags=["scales"])


@router.get("", response_model=ScaleListResponse, summary="List scales")
async def list_all_scales(
    auth_user: CurrentUser,
    month: Optional[str] = Query(None, description="Restrict to weeks starting in this month (YYYY-MM)"),
    group_id: Optional[str] = Query(None, alias="groupId"),
) -> ScaleListResponse:
    supabase_client = get_supabase_client()

    try:
        scales = await list_scales(supabase_client, month=month, group_id=group_id)
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to list scales: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to list scales")

    return ScaleListResponse(scales=[ScaleResponse.model_validate(s) for s in scales])


@router.post(
    "",
    response_model=ScaleMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a scale",
    description="""
    Create a weekly scale.

    - weekEnd defaults to weekStart + 6 days
    - status defaults to DRAFT
    - assigned members (except the creator) get SCALE_ASSIGNMENT, plus
      SCALE_PUBLISHED when created as PUBLISHED
    """
)
async def create_scale_record(request: ScaleCreateRequest, auth_user: AdminUser) -> ScaleMutationResponse:
    supabase_client = get_supabase_client()

    try:
        scale = await create_scale(
            supabase_client,
            created_by=auth_user.user_id,
            week_start=request.week_start,
            week_end=request.week_end,
            assigned_member_ids=request.assigned_member_ids,
            group_id=request.group_id,
            status=request.status,
        )
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to create scale: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create scale")

    return ScaleMutationResponse(
        message="Scale created successfully",
        scale=ScaleResponse.model_validate(scale),
    )


@router.put("/{scale_id}", response_model=ScaleMutationResponse, summary="Update a scale")
async def update_scale_record(
    scale_id: str,
    request: ScaleUpdateRequest,
    auth_user: AdminUser,
) -> ScaleMutationResponse:
    supabase_client = get_supabase_client()

    try:
        scale = await update_scale(
            supabase_client,
            scale_id,
            request.to_row(exclude_unset=True),
            actor_id=auth_user.user_id,
        )
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to update scale {scale_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update scale")

    if scale is None:
        raise not_found("Scale", scale_id)

    return ScaleMutationResponse(
        message="Scale updated successfully",
        scale=ScaleResponse.model_validate(scale),
    )


@router.delete("/{scale_id}", response_model=SuccessResponse, summary="Delete a scale")
async def delete_scale_record(scale_id: str, auth_user: AdminUser) -> SuccessResponse:
    """Idempotent: deleting a scale that does not exist still succeeds."""
    supabase_client = get_supabase_client()

    try:
        await delete_scale(supabase_client, scale_id)
    except Exception as e:
        logger.error(f"Failed to delete scale {scale_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete scale")

    return SuccessResponse()


@router.post("/{scale_id}/viewed", response_model=SuccessResponse, summary="Mark a scale as viewed")
async def mark_viewed(scale_id: str, auth_user: CurrentUser) -> SuccessResponse:
    """Stamp viewedAt on the caller's own assignment (404 if not assigned)."""
    supabase_client = get_supabase_client()

    try:
        updated = await mark_scale_viewed(supabase_client, scale_id, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to mark scale {scale_id} viewed: {e}", exc_info=True)
        raise server_error("update_error", "Failed to mark scale as viewed")

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"No assignment on scale {scale_id} for this user"}
        )

    return SuccessResponse()
