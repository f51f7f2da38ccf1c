"""
Notification API endpoints.

Every endpoint is scoped to the authenticated caller; no role is required.
"""

import logging

from fastapi import APIRouter, Query

from backend.auth.dependencies import CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import not_found, server_error
from backend.schemas.common import SuccessResponse
from backend.schemas.notifications import NotificationListResponse, NotificationResponse
from backend.services.notification_service import (
    DEFAULT_NOTIFICATION_LIMIT,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
async def get_my_notifications(
    auth_user: CurrentUser,
    limit: int = Query(DEFAULT_NOTIFICATION_LIMIT, ge=1, le=100),
) -> NotificationListResponse:
    supabase_client = get_supabase_client()

    try:
        rows, unread_count = await list_notifications(supabase_client, auth_user.user_id, limit)
    except Exception as e:
        logger.error(f"Failed to fetch notifications for {auth_user.user_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch notifications")

    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(r) for r in rows],
        unread_count=unread_count,
    )


@router.post("/read-all", response_model=SuccessResponse, summary="Mark all as read")
async def read_all_notifications(auth_user: CurrentUser) -> SuccessResponse:
    supabase_client = get_supabase_client()

    try:
        await mark_all_notifications_read(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Failed to mark notifications read for {auth_user.user_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to mark notifications as read")

    return SuccessResponse()


@router.post("/{notification_id}/read", response_model=SuccessResponse, summary="Mark one as read")
async def read_notification(notification_id: str, auth_user: CurrentUser) -> SuccessResponse:
    supabase_client = get_supabase_client()

    try:
        updated = await mark_notification_read(supabase_client, auth_user.user_id, notification_id)
    except Exception as e:
        logger.error(f"Failed to mark notification {notification_id} read: {e}", exc_info=True)
        raise server_error("update_error", "Failed to mark notification as read")

    if not updated:
        raise not_found("Notification", notification_id)

    return SuccessResponse()
