"""
Pydantic schemas for devotional posts.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from backend.schemas.common import CamelModel, Pagination, PartialUpdateModel

Frequency = Literal["WEEKLY", "MONTHLY"]


class DevotionalCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, description="Devotional title")
    content: str = Field(..., min_length=1, description="Devotional body")
    frequency: Frequency = Field(..., description="Publication cadence (WEEKLY or MONTHLY)")
    published_at: Optional[datetime] = Field(
        None,
        description="Publication timestamp; defaults to now"
    )


class DevotionalUpdateRequest(PartialUpdateModel):
    """
    Partial update; only provided fields are written.
    """
    non_nullable = ("title", "content", "frequency", "published_at")

    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    frequency: Optional[Frequency] = None
    published_at: Optional[datetime] = None


class DevotionalResponse(CamelModel):
    id: str = Field(..., description="Devotional UUID")
    title: str
    content: str
    frequency: Frequency
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DevotionalListResponse(CamelModel):
    """
    Response for GET /devotionals - newest first, pages is never below 1.
    """
    data: List[DevotionalResponse]
    pagination: Pagination


class DevotionalDetailResponse(CamelModel):
    devotional: DevotionalResponse


class DevotionalMutationResponse(CamelModel):
    message: str
    devotional: DevotionalResponse
