from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class NotificationSchema(BaseModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MarkNotificationsReadRequest(BaseModel):
    notification_ids: List[str] = Field(..., alias="notificationIds", min_length=1)

    class Config:
        populate_by_name = True


class MarkNotificationsReadResponse(BaseModel):
    message: str = "Notifications marked as read"
    updated: int = 0
