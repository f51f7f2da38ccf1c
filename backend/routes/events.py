"""
Event CRUD API endpoints.

Reads are open to any authenticated user; writes require ADMIN.
"""

import logging

from fastapi import APIRouter, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.common import MessageResponse
from backend.schemas.events import (
    EventCreateRequest,
    EventDetailResponse,
    EventListResponse,
    EventMutationResponse,
    EventResponse,
    EventUpdateRequest,
)
from backend.services.event_service import (
    create_event,
    delete_event,
    get_event_by_id,
    list_events,
    update_event,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse, summary="List events")
async def list_all_events(auth_user: CurrentUser) -> EventListResponse:
    """List every event ordered by start time (earliest first)."""
    supabase_client = get_supabase_client()

    try:
        events = await list_events(supabase_client)
    except Exception as e:
        logger.error(f"Failed to fetch events: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve events")

    return EventListResponse(events=[EventResponse.model_validate(e) for e in events])


@router.get("/{event_id}", response_model=EventDetailResponse, summary="Get an event")
async def get_event(event_id: str, auth_user: CurrentUser) -> EventDetailResponse:
    supabase_client = get_supabase_client()

    try:
        event = await get_event_by_id(supabase_client, event_id)
    except Exception as e:
        logger.error(f"Failed to fetch event {event_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve event")

    if event is None:
        raise not_found("Event", event_id)

    return EventDetailResponse(event=EventResponse.model_validate(event))


@router.post(
    "",
    response_model=EventMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
)
async def create_event_record(
    request: EventCreateRequest,
    auth_user: AdminUser,
) -> EventMutationResponse:
    logger.info(f"Creating event for admin {auth_user.user_id}")

    supabase_client = get_supabase_client()

    try:
        event = await create_event(
            supabase_client,
            author_id=auth_user.user_id,
            title=request.title,
            description=request.description,
            location=request.location,
            start_time=request.start_time,
            end_time=request.end_time,
        )
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to create event: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to save event to database")

    return EventMutationResponse(
        message="Event created successfully",
        event=EventResponse.model_validate(event),
    )


@router.put("/{event_id}", response_model=EventMutationResponse, summary="Update an event")
async def update_event_record(
    event_id: str,
    request: EventUpdateRequest,
    auth_user: AdminUser,
) -> EventMutationResponse:
    """
    Partially update an event.

    The time window is validated against the stored event, so sending only
    a new endTime that falls before the stored startTime is rejected (400).
    """
    supabase_client = get_supabase_client()

    changes = request.model_dump(exclude_unset=True)

    try:
        event = await update_event(supabase_client, event_id, changes)
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to update event {event_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update event")

    if event is None:
        raise not_found("Event", event_id)

    return EventMutationResponse(
        message="Event updated successfully",
        event=EventResponse.model_validate(event),
    )


@router.delete("/{event_id}", response_model=MessageResponse, summary="Delete an event")
async def delete_event_record(event_id: str, auth_user: AdminUser) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_event(supabase_client, event_id)
    except Exception as e:
        logger.error(f"Failed to delete event {event_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete event")

    if not deleted:
        raise not_found("Event", event_id)

    return MessageResponse(message="Event deleted successfully")
