"""
Pydantic schemas for event CRUD endpoints.

Events are time-bounded ministry activities; endTime must be after startTime.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from backend.schemas.common import AuthorSummary, CamelModel, PartialUpdateModel, ensure_aware


class EventCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, description="Event title")
    description: Optional[str] = Field(None, description="Free-text description")
    location: Optional[str] = Field(None, description="Where the event happens")
    start_time: datetime = Field(..., description="ISO-8601 start", examples=["2025-03-01T19:00:00Z"])
    end_time: datetime = Field(..., description="ISO-8601 end", examples=["2025-03-01T21:00:00Z"])

    @model_validator(mode="after")
    def _end_after_start(self) -> "EventCreateRequest":
        if ensure_aware(self.end_time) <= ensure_aware(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class EventUpdateRequest(PartialUpdateModel):
    """
    Partial update.

    When only one of startTime/endTime is sent, the route checks the
    ordering against the stored value.
    """
    non_nullable = ("title", "start_time", "end_time")

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class EventResponse(CamelModel):
    id: str = Field(..., description="Event UUID")
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: str = Field(..., description="ISO-8601 start")
    end_time: str = Field(..., description="ISO-8601 end")
    author_id: Optional[str] = Field(None, description="UUID of the admin who created it")
    author: Optional[AuthorSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class EventDetailResponse(CamelModel):
    event: EventResponse


class EventListResponse(CamelModel):
    events: List[EventResponse]


class EventMutationResponse(CamelModel):
    message: str
    event: EventResponse
