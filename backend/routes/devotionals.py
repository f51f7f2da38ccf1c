"""
Devotional post API endpoints.

Any authenticated user can browse devotionals; publishing requires ADMIN.
"""

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Query, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.common import MessageResponse, build_pagination, iso_date
from backend.schemas.devotionals import (
    DevotionalCreateRequest,
    DevotionalDetailResponse,
    DevotionalListResponse,
    DevotionalMutationResponse,
    DevotionalResponse,
    DevotionalUpdateRequest,
)
from backend.services.devotional_service import (
    create_devotional,
    delete_devotional,
    get_devotional_by_id,
    list_devotionals,
    update_devotional,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devotionals", tags=["devotionals"])


@router.get(
    "",
    response_model=DevotionalListResponse,
    summary="List devotionals",
    description="""
    Paginated list ordered by publishedAt (newest first).

    - q: case-insensitive match on title or content
    - frequency: WEEKLY or MONTHLY
    - startDate / endDate: inclusive bounds on publishedAt
    """
)
async def list_all_devotionals(
    auth_user: CurrentUser,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    q: Optional[str] = Query(None, description="Search term"),
    frequency: Optional[Literal["WEEKLY", "MONTHLY"]] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
) -> DevotionalListResponse:
    supabase_client = get_supabase_client()

    try:
        rows, total = await list_devotionals(
            supabase_client,
            page=page,
            limit=limit,
            q=q,
            frequency=frequency,
            start_date=iso_date(start_date),
            end_date=iso_date(end_date),
        )
    except Exception as e:
        logger.error(f"Failed to list devotionals: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to list devotionals")

    return DevotionalListResponse(
        data=[DevotionalResponse.model_validate(r) for r in rows],
        pagination=build_pagination(page, limit, total, min_pages=1),
    )


@router.get("/{devotional_id}", response_model=DevotionalDetailResponse, summary="Get a devotional")
async def get_devotional(devotional_id: str, auth_user: CurrentUser) -> DevotionalDetailResponse:
    supabase_client = get_supabase_client()

    try:
        devotional = await get_devotional_by_id(supabase_client, devotional_id)
    except Exception as e:
        logger.error(f"Failed to fetch devotional {devotional_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch devotional")

    if devotional is None:
        raise not_found("Devotional", devotional_id)

    return DevotionalDetailResponse(devotional=DevotionalResponse.model_validate(devotional))


@router.post(
    "",
    response_model=DevotionalMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a devotional",
)
async def create_devotional_record(
    request: DevotionalCreateRequest,
    auth_user: AdminUser,
) -> DevotionalMutationResponse:
    supabase_client = get_supabase_client()

    try:
        devotional = await create_devotional(supabase_client, request.to_row())
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to create devotional: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create devotional")

    return DevotionalMutationResponse(
        message="Devotional created successfully",
        devotional=DevotionalResponse.model_validate(devotional),
    )


@router.put("/{devotional_id}", response_model=DevotionalMutationResponse, summary="Update a devotional")
async def update_devotional_record(
    devotional_id: str,
    request: DevotionalUpdateRequest,
    auth_user: AdminUser,
) -> DevotionalMutationResponse:
    supabase_client = get_supabase_client()

    try:
        devotional = await update_devotional(
            supabase_client,
            devotional_id,
            request.to_row(exclude_unset=True),
        )
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to update devotional {devotional_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update devotional")

    if devotional is None:
        raise not_found("Devotional", devotional_id)

    return DevotionalMutationResponse(
        message="Devotional updated successfully",
        devotional=DevotionalResponse.model_validate(devotional),
    )


@router.delete("/{devotional_id}", response_model=MessageResponse, summary="Delete a devotional")
async def delete_devotional_record(devotional_id: str, auth_user: AdminUser) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_devotional(supabase_client, devotional_id)
    except Exception as e:
        logger.error(f"Failed to delete devotional {devotional_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete devotional")

    if not deleted:
        raise not_found("Devotional", devotional_id)

    return MessageResponse(message="Devotional deleted successfully")
