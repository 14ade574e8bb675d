"""Notification repository - Database operations for notifications"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def create(db: Session, **notification_data) -> Notification:
        notification = Notification(**notification_data)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def get_for_user(db: Session, user_id: int, status: Optional[str] = None) -> list[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if status:
            query = query.filter(Notification.status == status)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def mark_read(db: Session, notification: Notification) -> Notification:
        notification.status = "read"
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.status == "unread")
            .update({Notification.status: "read"}, synchronize_session=False)
        )
        db.commit()
        return updated
