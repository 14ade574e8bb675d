"""
Notification sink.

Emitting is fire-and-forget: a failed write is logged and rolled back, never
raised, so workflow operations are not blocked by notification problems.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification, User
from ...shared.exceptions import NotFoundError, UnauthorizedError
from ..users.repository import UserRepository
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Writes and reads in-app notification records"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def emit(
        self,
        user_id: int,
        title: str,
        message: str,
        notification_type: str = "default",
        action: Optional[dict] = None,
    ) -> Optional[Notification]:
        try:
            notification = self.repo.create(
                self.db,
                user_id=user_id,
                title=title,
                message=message,
                status="unread",
                notification_type=notification_type,
                action=action,
            )
            logger.info(f"🔔 Notification '{title}' sent to user {user_id}")
            return notification
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create notification '{title}' for user {user_id}: {e}")
            return None

    # Workflow emitters

    def booking_received(self, owner_id: int, spot_name: str) -> Optional[Notification]:
        return self.emit(
            owner_id,
            "New Booking",
            f"New booking received for {spot_name}",
            "booking",
            {"type": "view", "link": "/dashboard/bookings"},
        )

    def payment_received(self, owner_id: int, spot_name: str, amount: float) -> Optional[Notification]:
        return self.emit(
            owner_id,
            "Payment Received",
            f"Payment of £{amount:.2f} received for {spot_name}",
            "booking",
            {"type": "view", "link": "/dashboard/bookings"},
        )

    def request_reviewed(
        self, owner_id: int, subject: str, approved: bool, reason: Optional[str] = None
    ) -> Optional[Notification]:
        if approved:
            title = "Spot Request Approved"
            message = f"Your request for {subject} has been approved"
        else:
            title = "Spot Request Rejected"
            message = f"Your request for {subject} has been rejected"
            if reason:
                message = f"{message}: {reason}"
        return self.emit(
            owner_id,
            title,
            message,
            "approval" if approved else "rejection",
            {"type": "view", "link": "/dashboard/my-requests"},
        )

    def request_submitted(self, spot_name: str) -> int:
        """Tell every admin a request is waiting for review. Returns how many were notified."""
        sent = 0
        for admin in UserRepository.get_admins(self.db):
            note = self.emit(
                admin.id,
                "New Parking Spot Request",
                f"A space owner has submitted a new request for parking spot: {spot_name}",
                "request",
                {"type": "view", "link": "/dashboard/requests"},
            )
            if note:
                sent += 1
        return sent

    # Read side

    def list_notifications(self, user: User, status: Optional[str] = None) -> list[Notification]:
        return self.repo.get_for_user(self.db, user.id, status)

    def mark_read(self, notification_id: int, user: User) -> Notification:
        notification = self.repo.get_by_id(self.db, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.user_id != user.id:
            raise UnauthorizedError("Not your notification")
        return self.repo.mark_read(self.db, notification)

    def mark_all_read(self, user: User) -> dict:
        updated = self.repo.mark_all_read(self.db, user.id)
        return {"message": "Notifications marked as read", "updatedCount": updated}
