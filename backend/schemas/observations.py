"""
Pydantic schemas for observations (pastoral notes published to members).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from backend.schemas.common import AuthorSummary, CamelModel, Pagination, PartialUpdateModel


class ObservationCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, description="Observation title")
    content: str = Field(..., min_length=1, description="Observation body")
    category: Optional[str] = Field(None, description="Free-text category", examples=["Louvor"])
    published_at: Optional[datetime] = Field(None, description="Defaults to now")


class ObservationUpdateRequest(PartialUpdateModel):
    non_nullable = ("title", "content", "published_at")

    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    published_at: Optional[datetime] = None


class ObservationResponse(CamelModel):
    id: str = Field(..., description="Observation UUID")
    title: str
    content: str
    category: Optional[str] = None
    published_at: Optional[str] = None
    author_id: Optional[str] = None
    author: Optional[AuthorSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ObservationListResponse(CamelModel):
    data: List[ObservationResponse]
    pagination: Pagination


class ObservationDetailResponse(CamelModel):
    observation: ObservationResponse


class ObservationMutationResponse(CamelModel):
    message: str
    observation: ObservationResponse
