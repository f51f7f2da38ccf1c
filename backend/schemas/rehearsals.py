"""
Pydantic schemas for rehearsal CRUD endpoints.
"""

from typing import List, Optional

from pydantic import Field

from backend.schemas.common import AuthorSummary, CamelModel, PartialUpdateModel


class RehearsalCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, description="Rehearsal title")
    date: str = Field(..., min_length=1, description="ISO-8601 date/time", examples=["2025-03-06T19:30:00Z"])
    location: Optional[str] = None
    notes: Optional[str] = None


class RehearsalUpdateRequest(PartialUpdateModel):
    non_nullable = ("title", "date")

    title: Optional[str] = Field(None, min_length=1)
    date: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    notes: Optional[str] = None


class RehearsalResponse(CamelModel):
    id: str
    title: str
    date: str
    location: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = Field(None, description="UUID of the admin who scheduled it")
    author: Optional[AuthorSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RehearsalListResponse(CamelModel):
    rehearsals: List[RehearsalResponse]


class RehearsalDetailResponse(CamelModel):
    rehearsal: RehearsalResponse


class RehearsalMutationResponse(CamelModel):
    message: str
    rehearsal: RehearsalResponse
