"""
Shared Pydantic building blocks.

CamelModel is the field-mapping layer between the API and the database:
- clients send and receive camelCase JSON (weekStart, rehearsalId, ...)
- PostgREST rows come back snake_case (week_start, rehearsal_id, ...)

Every model accepts both spellings on input and serializes camelCase.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases that also accepts snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_row(self, *, exclude_unset: bool = False) -> Dict[str, Any]:
        """Dump to a snake_case dict ready for a PostgREST insert/update."""
        return self.model_dump(mode="json", by_alias=False, exclude_unset=exclude_unset)


class PartialUpdateModel(CamelModel):
    """
    Base for PUT bodies: omitted fields are left alone.

    Fields listed in non_nullable map to NOT NULL columns, so sending them
    as an explicit null is a validation error rather than a write.
    """

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_on_required_columns(self):
        nulls = [
            to_camel(name) for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Cannot be null: {', '.join(nulls)}")
        return self


class AuthorSummary(CamelModel):
    """Embedded author/user reference ({id, name, email})."""
    id: Optional[str] = Field(None, description="User UUID")
    name: Optional[str] = Field(None, description="User display name")
    email: Optional[str] = Field(None, description="User email")


class MemberSummary(CamelModel):
    """Embedded member reference used by groups and scales."""
    id: str = Field(..., description="User UUID")
    name: Optional[str] = Field(None, description="User display name")
    email: Optional[str] = Field(None, description="User email")
    photo_url: Optional[str] = Field(None, description="Public URL of the user's photo")


class Pagination(CamelModel):
    """Page metadata for list endpoints."""
    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Total rows matching the filters")
    pages: int = Field(..., description="Total number of pages")


class MessageResponse(CamelModel):
    """Generic acknowledgement body."""
    message: str = Field(..., description="Human-readable result")


class SuccessResponse(CamelModel):
    """Acknowledgement for idempotent deletes."""
    success: bool = Field(True, description="Always true when the request completed")


def build_pagination(page: int, limit: int, total: int, min_pages: int = 0) -> Pagination:
    """
    Compute pagination metadata.

    Args:
        page: Requested page (1-based)
        limit: Page size (> 0)
        total: Total matching rows
        min_pages: Lower bound for the reported page count

    Returns:
        Pagination with pages = max(min_pages, ceil(total / limit))
    """
    pages = math.ceil(total / limit) if limit > 0 else 0
    return Pagination(page=page, limit=limit, total=total, pages=max(min_pages, pages))


def page_bounds(page: int, limit: int) -> tuple[int, int]:
    """Return the inclusive (start, end) row range for PostgREST .range()."""
    start = (page - 1) * limit
    return start, start + limit - 1


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they can be compared with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def iso_date(value: Optional[date]) -> Optional[str]:
    """Format an optional query-string date for a PostgREST filter."""
    return value.isoformat() if value else None
