"""
Scale (weekly roster) persistence service.

RULES:
1. week_end defaults to week_start + 6 days and is never before week_start
2. Assignments are keyed on (scale_id, user_id) and written with upserts
3. Replacing the assignments keeps viewed_at for members who stay assigned
4. Notifications never include the acting admin
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from supabase import Client

from backend.schemas.common import utc_now_iso
from backend.services.notification_service import notify_users
from backend.services.resource_service import TableService
from backend.utils.constants import NOTIFICATION_ENTITY_TYPES, NOTIFICATION_TYPES

logger = logging.getLogger(__name__)

ASSIGNMENT_CONFLICT_TARGET = "scale_id,user_id"

scales_table = TableService(
    "scales",
    select=(
        "id,week_start,week_end,status,group_id,created_by,created_at,updated_at,"
        "assignments:scale_assignments(user_id,viewed_at,user:users(id,name,email,photo_url))"
    ),
    order=(("week_start", False), ("created_at", True)),
)


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def month_range(month: str) -> Tuple[str, str]:
    """
    First and last day of a YYYY-MM month as ISO dates.

    Raises:
        ValueError: If month is not a valid YYYY-MM value
    """
    try:
        year_str, month_str = month.split("-")
        if len(year_str) != 4 or len(month_str) != 2:
            raise ValueError
        first = date(int(year_str), int(month_str), 1)
    except ValueError:
        raise ValueError(f"Invalid month '{month}'. Expected YYYY-MM")

    next_month = date(first.year + first.month // 12, first.month % 12 + 1, 1)
    return first.isoformat(), (next_month - timedelta(days=1)).isoformat()


def _with_members(row: Dict[str, Any]) -> Dict[str, Any]:
    scale = dict(row)
    assignments = scale.pop("assignments", None) or []
    members = []
    for assignment in assignments:
        user = assignment.get("user") or {"id": assignment["user_id"]}
        members.append({**user, "viewed_at": assignment.get("viewed_at")})
    scale["members"] = members
    return scale


def _period(scale: Dict[str, Any]) -> str:
    return f"Week {scale['week_start']} to {scale['week_end']}"


async def _upsert_assignments(supabase_client: Client, scale_id: str, user_ids: Sequence[str]) -> None:
    if not user_ids:
        return
    now = utc_now_iso()
    supabase_client.table("scale_assignments").upsert(
        [
            {"scale_id": scale_id, "user_id": uid, "created_at": now, "updated_at": now}
            for uid in user_ids
        ],
        on_conflict=ASSIGNMENT_CONFLICT_TARGET,
    ).execute()


async def _notify_assigned(
    supabase_client: Client,
    scale: Dict[str, Any],
    user_ids: Sequence[str],
    actor_id: str,
) -> None:
    await notify_users(
        supabase_client,
        user_ids,
        actor_id=actor_id,
        notification_type=NOTIFICATION_TYPES['SCALE_ASSIGNMENT'],
        title="You have been assigned to a scale",
        message=_period(scale),
        entity_type=NOTIFICATION_ENTITY_TYPES['SCALE'],
        entity_id=scale["id"],
    )


async def _notify_published(
    supabase_client: Client,
    scale: Dict[str, Any],
    user_ids: Sequence[str],
    actor_id: str,
) -> None:
    await notify_users(
        supabase_client,
        user_ids,
        actor_id=actor_id,
        notification_type=NOTIFICATION_TYPES['SCALE_PUBLISHED'],
        title="Scale published",
        message=_period(scale),
        entity_type=NOTIFICATION_ENTITY_TYPES['SCALE'],
        entity_id=scale["id"],
    )


async def list_scales(
    supabase_client: Client,
    month: Optional[str] = None,
    group_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Scales ordered by week_start, optionally restricted to a month and group.

    Raises:
        ValueError: If month is not YYYY-MM
    """
    bounds = month_range(month) if month else None

    def apply(query):
        if group_id:
            query = query.eq("group_id", group_id)
        if bounds:
            query = query.gte("week_start", bounds[0]).lte("week_start", bounds[1])
        return query

    rows = await scales_table.list(supabase_client, apply_filters=apply)
    return [_with_members(row) for row in rows]


async def get_scale_by_id(supabase_client: Client, scale_id: str) -> Optional[Dict[str, Any]]:
    row = await scales_table.get(supabase_client, scale_id)
    return _with_members(row) if row else None


async def create_scale(
    supabase_client: Client,
    created_by: str,
    week_start: date,
    week_end: Optional[date] = None,
    assigned_member_ids: Sequence[str] = (),
    group_id: Optional[str] = None,
    status: str = "DRAFT",
) -> Dict[str, Any]:
    """
    Create a scale, assign its members and notify them.

    Assigned members (except the creator) receive SCALE_ASSIGNMENT, and
    SCALE_PUBLISHED as well when the scale is created already published.
    """
    week_start = _as_date(week_start)
    week_end = _as_date(week_end) if week_end else week_start + timedelta(days=6)

    payload = {
        "week_start": week_start.isoformat(),
        "week_end": week_end.isoformat(),
        "status": status,
        "group_id": group_id or None,
        "created_by": created_by,
    }
    created = await scales_table.create(supabase_client, payload)
    scale_id = created["id"]
    member_ids = list(dict.fromkeys(assigned_member_ids))

    await _upsert_assignments(supabase_client, scale_id, member_ids)

    scale = await get_scale_by_id(supabase_client, scale_id) or _with_members({**payload, **created})
    logger.info(f"Scale created: id={scale_id} week={scale['week_start']} members={len(member_ids)}")

    await _notify_assigned(supabase_client, scale, member_ids, created_by)
    if status == "PUBLISHED":
        await _notify_published(supabase_client, scale, member_ids, created_by)

    return scale


async def update_scale(
    supabase_client: Client,
    scale_id: str,
    changes: Dict[str, Any],
    actor_id: str,
) -> Optional[Dict[str, Any]]:
    """
    Partially update a scale.

    assigned_member_ids, when present, replaces the assignments: removed
    members are deleted, new members are upserted and notified, retained
    members are left untouched (viewed_at survives). A transition to
    PUBLISHED notifies every member assigned after the update.

    Returns:
        The updated scale, or None if it does not exist

    Raises:
        ValueError: If the merged week window is invalid
    """
    existing = await get_scale_by_id(supabase_client, scale_id)
    if existing is None:
        return None

    fields = dict(changes)
    member_ids = fields.pop("assigned_member_ids", None)

    if "week_start" in fields or "week_end" in fields:
        start = _as_date(fields.get("week_start") or existing["week_start"])
        end = _as_date(fields.get("week_end") or existing["week_end"])
        if end < start:
            raise ValueError("weekEnd must not be before weekStart")
    if "group_id" in fields:
        fields["group_id"] = fields["group_id"] or None

    if fields:
        updated = await scales_table.update(supabase_client, scale_id, fields)
        if updated is None:
            return None

    added: List[str] = []
    if member_ids is not None:
        current = [m["id"] for m in existing["members"]]
        removed = [uid for uid in current if uid not in member_ids]
        added = [uid for uid in member_ids if uid not in current]

        if removed:
            (
                supabase_client.table("scale_assignments")
                .delete()
                .eq("scale_id", scale_id)
                .in_("user_id", removed)
                .execute()
            )
        await _upsert_assignments(supabase_client, scale_id, added)
        logger.info(f"Scale {scale_id} assignments: +{len(added)} -{len(removed)}")

    scale = await get_scale_by_id(supabase_client, scale_id) or existing

    if added:
        await _notify_assigned(supabase_client, scale, added, actor_id)
    if existing.get("status") != "PUBLISHED" and scale.get("status") == "PUBLISHED":
        await _notify_published(supabase_client, scale, [m["id"] for m in scale["members"]], actor_id)

    return scale


async def delete_scale(supabase_client: Client, scale_id: str) -> None:
    """Delete a scale and its assignments; absent scales are ignored."""
    supabase_client.table("scale_assignments").delete().eq("scale_id", scale_id).execute()
    deleted = await scales_table.delete(supabase_client, scale_id)
    if not deleted:
        logger.info(f"Scale {scale_id} already absent")


async def mark_scale_viewed(supabase_client: Client, scale_id: str, user_id: str) -> bool:
    """
    Stamp viewed_at on the user's assignment.

    Returns:
        False if the user is not assigned to the scale
    """
    result = (
        supabase_client.table("scale_assignments")
        .update({"viewed_at": utc_now_iso()})
        .eq("scale_id", scale_id)
        .eq("user_id", user_id)
        .execute()
    )
    return bool(result.data)
