"""Booking repository - Database operations for bookings"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import BLOCKING_BOOKING_STATUSES, Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def query_by_spot(
        db: Session,
        spot_id: int,
        status_in: tuple = BLOCKING_BOOKING_STATUSES,
        start_after: Optional[datetime] = None,
    ) -> list[Booking]:
        query = db.query(Booking).filter(Booking.spot_id == spot_id, Booking.status.in_(status_in))
        if start_after is not None:
            query = query.filter(Booking.start_time >= start_after)
        return query.order_by(Booking.start_time).all()

    @staticmethod
    def find_overlapping(
        db: Session, spot_id: int, start: datetime, end: datetime
    ) -> list[Booking]:
        """Pending/active bookings on the spot whose [start, end) meets the given range"""
        return (
            db.query(Booking)
            .filter(
                Booking.spot_id == spot_id,
                Booking.status.in_(BLOCKING_BOOKING_STATUSES),
                Booking.start_time < end,
                Booking.end_time > start,
            )
            .all()
        )

    @staticmethod
    def get_by_user(db: Session, user_id: int) -> list[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.start_time.desc())
            .all()
        )

    @staticmethod
    def get_by_owner(db: Session, owner_id: int, limit: int = 100) -> list[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.owner_id == owner_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_finished_active(db: Session, now: datetime) -> list[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.status == "active", Booking.end_time < now)
            .all()
        )

    @staticmethod
    def create(db: Session, **booking_data) -> Booking:
        """Stage a new booking; the caller commits"""
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def update(db: Session, booking: Booking, **updates) -> Booking:
        for key, value in updates.items():
            setattr(booking, key, value)
        db.commit()
        db.refresh(booking)
        return booking
