"""
Rehearsal attendance API endpoints (ADMIN only).
"""

import logging

from fastapi import APIRouter, Query

from backend.auth.dependencies import AdminUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, server_error
from backend.schemas.attendance import (
    AttendanceBatchRequest,
    AttendanceListResponse,
    AttendanceRecordResponse,
)
from backend.services.attendance_service import list_attendance, set_attendance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post(
    "",
    response_model=AttendanceListResponse,
    summary="Record attendance for a rehearsal",
    description="""
    Upsert one attendance record per member for the given rehearsal.

    The batch is all-or-nothing: a JUSTIFIED record without a note, an
    unknown status or a member listed twice rejects the whole request
    with 400 and nothing is written. Resubmitting a member overwrites
    their earlier record.
    """
)
async def record_attendance(
    request: AttendanceBatchRequest,
    auth_user: AdminUser,
) -> AttendanceListResponse:
    logger.info(
        f"Admin {auth_user.user_id} recording attendance for rehearsal "
        f"{request.rehearsal_id} ({len(request.records)} records)"
    )

    supabase_client = get_supabase_client()

    try:
        records = await set_attendance(
            supabase_client,
            request.rehearsal_id,
            [record.to_row() for record in request.records],
        )
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to save attendance for {request.rehearsal_id}: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to save attendance")

    return AttendanceListResponse(records=[AttendanceRecordResponse.model_validate(r) for r in records])


@router.get("", response_model=AttendanceListResponse, summary="Attendance of a rehearsal")
async def get_attendance(
    auth_user: AdminUser,
    rehearsal_id: str = Query(..., alias="rehearsalId", min_length=1),
) -> AttendanceListResponse:
    supabase_client = get_supabase_client()

    try:
        records = await list_attendance(supabase_client, rehearsal_id)
    except Exception as e:
        logger.error(f"Failed to fetch attendance for {rehearsal_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch attendance")

    return AttendanceListResponse(records=[AttendanceRecordResponse.model_validate(r) for r in records])
