"""Notification router - in-app notification endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import NotificationResponse
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    status: Optional[str] = Query(None, description="unread or read"),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Get the current user's notifications, newest first"""
    return [
        NotificationResponse.from_notification(n)
        for n in service.list_notifications(current_user, status)
    ]


@router.post("/read-all")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_all_read(current_user)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return NotificationResponse.from_notification(service.mark_read(notification_id, current_user))
