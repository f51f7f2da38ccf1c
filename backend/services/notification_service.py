"""
Notification service.

Notifications are a side effect of other writes (group items, scales).
Fan-out never fails the triggering request: insert errors are logged and
dropped.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, cast

from supabase import Client

from backend.schemas.common import utc_now_iso

logger = logging.getLogger(__name__)

NOTIFICATION_COLUMNS = "id,user_id,type,entity_type,entity_id,title,message,read,created_at,read_at"

DEFAULT_NOTIFICATION_LIMIT = 20


def select_recipients(user_ids: Iterable[Optional[str]], actor_id: Optional[str]) -> List[str]:
    """
    Drop the actor, empty ids and duplicates while keeping first-seen order.
    """
    recipients: List[str] = []
    seen = set()
    for user_id in user_ids:
        if not user_id or user_id == actor_id or user_id in seen:
            continue
        seen.add(user_id)
        recipients.append(user_id)
    return recipients


async def notify_users(
    supabase_client: Client,
    user_ids: Iterable[Optional[str]],
    actor_id: Optional[str],
    notification_type: str,
    title: str,
    message: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
) -> int:
    """
    Fan a notification out to a set of users with a single bulk insert.

    Args:
        user_ids: Candidate recipients (may contain duplicates or the actor)
        actor_id: User who triggered the event; never notified
        notification_type: One of NOTIFICATION_TYPES
        title: Short headline shown in the client
        message: Optional body text
        entity_type: GROUP or SCALE
        entity_id: UUID of the referenced entity

    Returns:
        Number of notifications written (0 when nothing was sent or the
        insert failed)
    """
    recipients = select_recipients(user_ids, actor_id)
    if not recipients or not title:
        return 0

    rows = [
        {
            "user_id": user_id,
            "type": notification_type,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "title": title,
            "message": message,
        }
        for user_id in recipients
    ]

    try:
        supabase_client.table("notifications").insert(rows).execute()
    except Exception as e:
        logger.error(
            f"Failed to create {len(rows)} {notification_type} notifications "
            f"for {entity_type} {entity_id}: {e}"
        )
        return 0

    logger.info(f"Sent {len(rows)} {notification_type} notifications for {entity_type} {entity_id}")
    return len(rows)


async def list_notifications(
    supabase_client: Client,
    user_id: str,
    limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Fetch the caller's most recent notifications plus their unread count.

    Returns:
        (notifications newest first, unread_count)
    """
    result = (
        supabase_client.table("notifications")
        .select(NOTIFICATION_COLUMNS)
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )

    unread = (
        supabase_client.table("notifications")
        .select("id", count="exact")
        .eq("user_id", user_id)
        .eq("read", False)
        .execute()
    )
    unread_count = unread.count if unread.count is not None else len(unread.data or [])

    rows = cast(List[Dict[str, Any]], result.data or [])
    for row in rows:
        row["message"] = row.get("message") or ""
        row["read"] = bool(row.get("read"))

    return rows, unread_count


async def mark_notification_read(
    supabase_client: Client,
    user_id: str,
    notification_id: str,
) -> bool:
    """
    Mark one of the user's notifications as read.

    Returns:
        False if no notification with that id belongs to the user
    """
    result = (
        supabase_client.table("notifications")
        .update({"read": True, "read_at": utc_now_iso()})
        .eq("id", notification_id)
        .eq("user_id", user_id)
        .execute()
    )
    return bool(result.data)


async def mark_all_notifications_read(supabase_client: Client, user_id: str) -> int:
    """Mark every unread notification of the user as read; returns how many changed."""
    result = (
        supabase_client.table("notifications")
        .update({"read": True, "read_at": utc_now_iso()})
        .eq("user_id", user_id)
        .eq("read", False)
        .execute()
    )
    updated = len(result.data or [])
    logger.info(f"Marked {updated} notifications read for user {user_id}")
    return updated
