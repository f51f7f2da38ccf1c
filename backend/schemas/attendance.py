"""
Pydantic schemas for rehearsal attendance.

A batch is accepted or rejected as a whole: one invalid record (unknown
status, JUSTIFIED without a note, repeated member) rejects every record.
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from backend.schemas.common import CamelModel

AttendanceStatus = Literal["PRESENT", "ABSENT", "JUSTIFIED"]


class AttendanceRecordInput(CamelModel):
    user_id: str = Field(..., min_length=1, description="Member UUID")
    status: AttendanceStatus = Field(..., description="PRESENT, ABSENT or JUSTIFIED")
    note: Optional[str] = Field(None, description="Required (non-blank) when status is JUSTIFIED")

    @field_validator("note")
    @classmethod
    def _blank_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @model_validator(mode="after")
    def _justified_needs_note(self) -> "AttendanceRecordInput":
        if self.status == "JUSTIFIED" and not self.note:
            raise ValueError(f"A note is required for JUSTIFIED attendance (user {self.user_id})")
        return self


class AttendanceBatchRequest(CamelModel):
    """
    Request body for POST /attendance.
    """
    rehearsal_id: str = Field(..., min_length=1, description="Rehearsal UUID")
    records: List[AttendanceRecordInput] = Field(..., description="One record per member")

    @model_validator(mode="after")
    def _unique_members(self) -> "AttendanceBatchRequest":
        seen = set()
        for record in self.records:
            if record.user_id in seen:
                raise ValueError(f"Duplicate attendance record for user {record.user_id}")
            seen.add(record.user_id)
        return self


class AttendanceUser(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class AttendanceRecordResponse(CamelModel):
    id: str
    rehearsal_id: str
    user_id: str
    status: AttendanceStatus
    note: Optional[str] = None
    marked_at: Optional[str] = None
    updated_at: Optional[str] = None
    user: Optional[AttendanceUser] = None


class AttendanceListResponse(CamelModel):
    records: List[AttendanceRecordResponse]
