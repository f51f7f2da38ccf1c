"""
Pydantic schemas for scales (weekly service rosters).

A scale covers one week (weekStart..weekEnd) and assigns members to it.
Assigned members get a SCALE_ASSIGNMENT notification; publishing the scale
sends SCALE_PUBLISHED.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from backend.schemas.common import CamelModel, MemberSummary, PartialUpdateModel

ScaleStatus = Literal["DRAFT", "PUBLISHED"]


def _unique_ids(ids: Optional[List[str]]) -> Optional[List[str]]:
    if ids is None:
        return None
    return list(dict.fromkeys(i for i in ids if i))


class ScaleCreateRequest(CamelModel):
    week_start: date = Field(..., description="First day of the week", examples=["2025-03-02"])
    week_end: Optional[date] = Field(None, description="Last day of the week; defaults to weekStart + 6 days")
    assigned_member_ids: List[str] = Field(default_factory=list, description="UUIDs of the assigned members")
    group_id: Optional[str] = Field(None, description="Group the scale belongs to")
    status: ScaleStatus = Field("DRAFT", description="DRAFT or PUBLISHED")

    @field_validator("assigned_member_ids")
    @classmethod
    def _dedupe_members(cls, value: List[str]) -> List[str]:
        return _unique_ids(value) or []

    @model_validator(mode="after")
    def _week_order(self) -> "ScaleCreateRequest":
        if self.week_end is not None and self.week_end < self.week_start:
            raise ValueError("weekEnd must not be before weekStart")
        return self


class ScaleUpdateRequest(PartialUpdateModel):
    """
    Partial update.

    assignedMemberIds, when present, replaces the assignments. Members who
    stay assigned keep their viewedAt.
    """
    non_nullable = ("week_start", "week_end", "status")

    week_start: Optional[date] = None
    week_end: Optional[date] = None
    assigned_member_ids: Optional[List[str]] = None
    group_id: Optional[str] = None
    status: Optional[ScaleStatus] = None

    @field_validator("assigned_member_ids")
    @classmethod
    def _dedupe_members(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _unique_ids(value)


class ScaleMember(MemberSummary):
    viewed_at: Optional[str] = Field(None, description="When the member opened the scale")


class ScaleResponse(CamelModel):
    id: str
    week_start: str
    week_end: str
    status: ScaleStatus
    group_id: Optional[str] = None
    created_by: Optional[str] = None
    members: List[ScaleMember] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ScaleListResponse(CamelModel):
    scales: List[ScaleResponse]


class ScaleMutationResponse(CamelModel):
    message: str
    scale: ScaleResponse
