"""Notification schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationAction(BaseModel):
    type: str  # view, approve, reject
    link: str


class NotificationResponse(BaseModel):
    id: int
    userId: int
    title: str
    message: str
    status: str
    notificationType: str
    action: Optional[NotificationAction] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_notification(cls, n) -> "NotificationResponse":
        return cls(
            id=n.id,
            userId=n.user_id,
            title=n.title,
            message=n.message,
            status=n.status,
            notificationType=n.notification_type,
            action=NotificationAction(**n.action) if n.action else None,
            createdAt=n.created_at,
        )
