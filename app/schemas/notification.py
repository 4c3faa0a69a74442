from pydantic import BaseModel
from typing import Optional, Dict, Any, List
from datetime import datetime


class NotificationBase(BaseModel):
    title: str
    message: Optional[str] = None
    type: str
    data: Optional[Dict[str, Any]] = None


class NotificationCreate(NotificationBase):
    recipient_id: Optional[str] = None


class NotificationResponse(NotificationBase):
    id: str
    recipient_id: Optional[str] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationsListResponse(BaseModel):
    success: bool
    notifications: List[NotificationResponse]
    unread_count: int


class NotificationActionResponse(BaseModel):
    success: bool
    message: str
