"""
Observation API endpoints.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import not_found, server_error
from backend.schemas.common import MessageResponse, build_pagination, iso_date
from backend.schemas.observations import (
    ObservationCreateRequest,
    ObservationDetailResponse,
    ObservationListResponse,
    ObservationMutationResponse,
    ObservationResponse,
    ObservationUpdateRequest,
)
from backend.services.observation_service import (
    create_observation,
    delete_observation,
    get_observation_by_id,
    list_observations,
    update_observation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/observations", tags=["observations"])


@router.get("", response_model=ObservationListResponse, summary="List observations")
async def list_all_observations(
    auth_user: CurrentUser,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    q: Optional[str] = Query(None, description="Search term matched on title or content"),
    category: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
) -> ObservationListResponse:
    supabase_client = get_supabase_client()

    try:
        rows, total = await list_observations(
            supabase_client,
            page=page,
            limit=limit,
            q=q,
            category=category,
            start_date=iso_date(start_date),
            end_date=iso_date(end_date),
        )
    except Exception as e:
        logger.error(f"Failed to list observations: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to list observations")

    return ObservationListResponse(
        data=[ObservationResponse.model_validate(r) for r in rows],
        pagination=build_pagination(page, limit, total, min_pages=1),
    )


@router.get("/{observation_id}", response_model=ObservationDetailResponse, summary="Get an observation")
async def get_observation(observation_id: str, auth_user: CurrentUser) -> ObservationDetailResponse:
    supabase_client = get_supabase_client()

    try:
        observation = await get_observation_by_id(supabase_client, observation_id)
    except Exception as e:
        logger.error(f"Failed to fetch observation {observation_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch observation")

    if observation is None:
        raise not_found("Observation", observation_id)

    return ObservationDetailResponse(observation=ObservationResponse.model_validate(observation))


@router.post(
    "",
    response_model=ObservationMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish an observation",
)
async def create_observation_record(
    request: ObservationCreateRequest,
    auth_user: AdminUser,
) -> ObservationMutationResponse:
    supabase_client = get_supabase_client()

    try:
        observation = await create_observation(supabase_client, auth_user.user_id, request.to_row())
    except Exception as e:
        logger.error(f"Failed to create observation: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create observation")

    return ObservationMutationResponse(
        message="Observation created successfully",
        observation=ObservationResponse.model_validate(observation),
    )


@router.put("/{observation_id}", response_model=ObservationMutationResponse, summary="Update an observation")
async def update_observation_record(
    observation_id: str,
    request: ObservationUpdateRequest,
    auth_user: AdminUser,
) -> ObservationMutationResponse:
    supabase_client = get_supabase_client()

    try:
        observation = await update_observation(
            supabase_client,
            observation_id,
            request.to_row(exclude_unset=True),
        )
    except Exception as e:
        logger.error(f"Failed to update observation {observation_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update observation")

    if observation is None:
        raise not_found("Observation", observation_id)

    return ObservationMutationResponse(
        message="Observation updated successfully",
        observation=ObservationResponse.model_validate(observation),
    )


@router.delete("/{observation_id}", response_model=MessageResponse, summary="Delete an observation")
async def delete_observation_record(observation_id: str, auth_user: AdminUser) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_observation(supabase_client, observation_id)
    except Exception as e:
        logger.error(f"Failed to delete observation {observation_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete observation")

    if not deleted:
        raise not_found("Observation", observation_id)

    return MessageResponse(message="Observation deleted successfully")
