from pydantic import BaseModel
from typing import List, Literal, Optional
from datetime import datetime

NotificationType = Literal["member_added", "member_updated", "member_deleted"]


class NotificationResponse(BaseModel):
    id: str
    type: NotificationType
    message: str
    trainer_id: str
    trainer_name: str
    member_id: Optional[str] = None
    member_name: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class NotificationUpdate(BaseModel):
    """Mark one notification (``id``) or every notification (``all``) as read"""
    id: Optional[str] = None
    all: bool = False
