"""
Pydantic schemas for in-app notifications.
"""

from typing import List, Literal, Optional

from pydantic import Field

from backend.schemas.common import CamelModel

NotificationType = Literal["GROUP_ITEM_PUBLISHED", "SCALE_ASSIGNMENT", "SCALE_PUBLISHED"]


class NotificationResponse(CamelModel):
    id: str = Field(..., description="Notification UUID")
    user_id: str = Field(..., description="Recipient user UUID")
    type: NotificationType
    entity_type: Optional[Literal["GROUP", "SCALE"]] = Field(
        None,
        description="Kind of entity the notification points at"
    )
    entity_id: Optional[str] = Field(None, description="UUID of the referenced group/scale")
    title: str
    message: str = ""
    read: bool = False
    created_at: Optional[str] = None
    read_at: Optional[str] = None


class NotificationListResponse(CamelModel):
    """
    Response for GET /notifications.

    unread_count covers every unread notification of the caller, not just
    the returned page.
    """
    notifications: List[NotificationResponse]
    unread_count: int = Field(..., description="Total unread notifications for the caller")
