"""
Pydantic schemas for groups (ministry teams) and the items shared with them.
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator

from backend.schemas.common import AuthorSummary, CamelModel, MemberSummary, PartialUpdateModel

GroupItemType = Literal["LINK", "FILE"]


def _dedupe(ids: Optional[List[str]]) -> Optional[List[str]]:
    if ids is None:
        return None
    return list(dict.fromkeys(i for i in ids if i))


# --- Group models ---

class GroupCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Group name", examples=["Worship team"])
    description: Optional[str] = Field("", description="What the group is for")
    member_ids: List[str] = Field(default_factory=list, description="UUIDs of the initial members")

    @field_validator("member_ids")
    @classmethod
    def _unique_members(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _dedupe(value)


class GroupUpdateRequest(PartialUpdateModel):
    """
    Partial update.

    memberIds, when present, replaces the whole membership.
    """
    non_nullable = ("name",)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    member_ids: Optional[List[str]] = None

    @field_validator("member_ids")
    @classmethod
    def _unique_members(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _dedupe(value)


class GroupResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = ""
    created_by: Optional[str] = None
    members: List[MemberSummary] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class GroupListResponse(CamelModel):
    groups: List[GroupResponse]


class GroupDetailResponse(CamelModel):
    group: GroupResponse


class GroupMutationResponse(CamelModel):
    message: str
    group: GroupResponse


# --- Group item models ---

class GroupItemCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, description="Item title")
    description: Optional[str] = None
    type: GroupItemType = Field(..., description="LINK or FILE")
    url: Optional[str] = Field(None, description="Target URL for LINK items")
    storage_path: Optional[str] = Field(None, description="Storage path for FILE items")


class GroupItemResponse(CamelModel):
    id: str
    group_id: str
    title: str
    description: Optional[str] = ""
    type: GroupItemType
    url: Optional[str] = None
    storage_path: Optional[str] = None
    author_id: Optional[str] = None
    author: Optional[AuthorSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class GroupItemListResponse(CamelModel):
    items: List[GroupItemResponse]


class GroupItemDetailResponse(CamelModel):
    item: GroupItemResponse
