"""
Attendance persistence service.

RULES:
1. One record per (rehearsal, member); writes are upserts on that pair
2. JUSTIFIED requires a non-blank note
3. A batch is validated completely before anything is written
"""

import logging
from typing import Any, Dict, List, Sequence, cast

from supabase import Client

from backend.schemas.common import utc_now_iso
from backend.utils.constants import ATTENDANCE_STATUSES

logger = logging.getLogger(__name__)

ATTENDANCE_COLUMNS = "id,rehearsal_id,user_id,status,note,marked_at,updated_at"
ATTENDANCE_CONFLICT_TARGET = "rehearsal_id,user_id"


def validate_attendance_batch(records: Sequence[Dict[str, Any]]) -> None:
    """
    Check a whole batch of {user_id, status, note} records.

    Raises:
        ValueError: On the first invalid record; nothing should be written
    """
    seen = set()
    for record in records:
        user_id = record.get("user_id")
        status = record.get("status")
        if not user_id or status not in ATTENDANCE_STATUSES:
            raise ValueError("Invalid record: a userId and a valid status are required")
        if status == "JUSTIFIED" and not (record.get("note") or "").strip():
            raise ValueError(f"A note is required for JUSTIFIED attendance (user {user_id})")
        if user_id in seen:
            raise ValueError(f"Duplicate attendance record for user {user_id}")
        seen.add(user_id)


async def set_attendance(
    supabase_client: Client,
    rehearsal_id: str,
    records: Sequence[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Record attendance for a rehearsal in a single upsert.

    Resubmitting a member overwrites their previous record for the same
    rehearsal.

    Args:
        rehearsal_id: Rehearsal UUID
        records: [{user_id, status, note}]

    Returns:
        The stored records

    Raises:
        ValueError: If any record is invalid (nothing is written)
    """
    validate_attendance_batch(records)
    if not records:
        return []

    now = utc_now_iso()
    payload = [
        {
            "rehearsal_id": rehearsal_id,
            "user_id": record["user_id"],
            "status": record["status"],
            "note": (record.get("note") or "").strip() or None,
            "marked_at": now,
            "updated_at": now,
        }
        for record in records
    ]

    result = (
        supabase_client.table("attendance_records")
        .upsert(payload, on_conflict=ATTENDANCE_CONFLICT_TARGET)
        .execute()
    )

    logger.info(f"Attendance saved for rehearsal {rehearsal_id}: {len(payload)} records")
    return cast(List[Dict[str, Any]], result.data or [])


async def list_attendance(supabase_client: Client, rehearsal_id: str) -> List[Dict[str, Any]]:
    """Attendance records of a rehearsal with the member embedded."""
    result = (
        supabase_client.table("attendance_records")
        .select(f"{ATTENDANCE_COLUMNS},user:users(id,name,email,role)")
        .eq("rehearsal_id", rehearsal_id)
        .order("user_id")
        .execute()
    )
    return cast(List[Dict[str, Any]], result.data or [])
