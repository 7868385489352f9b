"""Notification schemas."""
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class NotificationMarkRead(BaseModel):
    """Mark one notification, or every unread one, as read."""
    notification_id: Optional[str] = None
    mark_all_as_read: bool = False
