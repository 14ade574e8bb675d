"""Booking service - slot availability, reservations and booking lifecycle"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...config import MAX_BOOKING_HOURS, OWNER_BOOKINGS_LIMIT
from ...models import BLOCKING_BOOKING_STATUSES, Booking, User
from ...shared.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ...shared.validators import utcnow
from ..notifications.service import NotificationService
from ..spots.events import BOOKING_CREATED, BOOKING_UPDATED, spot_events
from ..spots.repository import SpotRepository
from ..users.guards import is_admin
from .availability import is_bookable, resolve_available_slots, slot_interval, spot_open_on
from .repository import BookingRepository
from .schemas import BookingCreate

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.spots = SpotRepository()
        self.notifications = NotificationService(db)

    # Availability

    def get_available_slots(self, spot_id: int, day: date, now: Optional[datetime] = None) -> list[dict]:
        """Declared slots of the spot that are still free on ``day``"""
        spot = self.spots.get_spot(self.db, spot_id)
        if not spot:
            raise NotFoundError("Parking spot not found")

        now = now or utcnow()
        bookings = self.repo.query_by_spot(
            self.db, spot_id, BLOCKING_BOOKING_STATUSES, start_after=now
        )
        return resolve_available_slots(spot, day, bookings, now)

    # Reservation

    def reserve(self, data: BookingCreate, user: User, now: Optional[datetime] = None) -> Booking:
        """Atomically reserve a slot if nothing overlapping holds the spot.

        The spot row is locked for the duration of the check and the insert so
        two concurrent reservations of the same range cannot both succeed.
        """
        now = now or utcnow()

        if data.durationHours < 1 or data.durationHours > MAX_BOOKING_HOURS:
            raise ValidationError(f"Duration must be between 1 and {MAX_BOOKING_HOURS} hours")

        try:
            spot = self.spots.get_spot_for_update(self.db, data.spotId)
            if not spot:
                raise NotFoundError("Parking spot not found")
            if not is_bookable(spot):
                raise InvalidStateError("This parking spot is currently unavailable")
            if not spot_open_on(spot, data.date):
                raise ValidationError("This parking spot is not open on the selected day")

            slot = next(
                (s for s in (spot.time_slots or []) if s["start"] == data.startTime), None
            )
            if slot is None:
                raise ValidationError("Start time does not match any of the spot's time slots")

            start_time, _ = slot_interval(data.date, slot)
            end_time = start_time + timedelta(hours=data.durationHours)
            if start_time <= now:
                raise ValidationError("Bookings must start in the future")

            conflicts = self.repo.find_overlapping(self.db, spot.id, start_time, end_time)
            if conflicts:
                logger.warning(
                    f"⚠️ Booking conflict on spot {spot.id} for {start_time}-{end_time} "
                    f"(existing: {[b.id for b in conflicts]})"
                )
                raise ConflictError("This time slot has already been booked")

            booking = self.repo.create(
                self.db,
                spot_id=spot.id,
                owner_id=spot.owner_id,
                user_id=user.id,
                start_time=start_time,
                end_time=end_time,
                duration_hours=data.durationHours,
                total_amount=round(spot.price_per_hour * data.durationHours, 2),
                payment_status="pending",
                status="pending",
                spot_name=spot.name,
                user_email=user.email,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"✅ Booking {booking.id} reserved on spot {booking.spot_id} by user {user.id}")

        self.notifications.booking_received(booking.owner_id, booking.spot_name)
        spot_events.publish(booking.spot_id, BOOKING_CREATED, {"booking_id": booking.id})
        return booking

    # Lifecycle

    def get_booking(self, booking_id: int, user: User) -> Booking:
        """Visible to the renter, the spot owner and admins"""
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if user.id not in (booking.user_id, booking.owner_id) and not is_admin(self.db, user):
            raise UnauthorizedError("You cannot view this booking")
        return booking

    def _get_renter_booking(self, booking_id: int, user: User) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.user_id != user.id:
            raise UnauthorizedError("You do not own this booking")
        return booking

    def confirm_payment(self, booking_id: int, user: User) -> Booking:
        """Payment succeeded: promote the booking to active"""
        booking = self._get_renter_booking(booking_id, user)
        if booking.status != "pending" or booking.payment_status != "pending":
            raise InvalidStateError(f"Cannot confirm payment for a {booking.status} booking")

        booking = self.repo.update(
            self.db, booking, payment_status="completed", status="active"
        )
        logger.info(f"💳 Payment confirmed for booking {booking.id}")

        self.notifications.payment_received(booking.owner_id, booking.spot_name, booking.total_amount)
        spot_events.publish(booking.spot_id, BOOKING_UPDATED, {"booking_id": booking.id, "status": "active"})
        return booking

    def fail_payment(self, booking_id: int, user: User) -> Booking:
        """Payment failed: the booking is cancelled and its time range released"""
        booking = self._get_renter_booking(booking_id, user)
        if booking.status != "pending":
            raise InvalidStateError(f"Cannot fail payment for a {booking.status} booking")

        booking = self.repo.update(self.db, booking, payment_status="failed", status="cancelled")
        logger.info(f"❌ Payment failed for booking {booking.id}, slot released")

        spot_events.publish(booking.spot_id, BOOKING_UPDATED, {"booking_id": booking.id, "status": "cancelled"})
        return booking

    def cancel(self, booking_id: int, user: User, now: Optional[datetime] = None) -> Booking:
        """Renter cancels a booking that has not finished yet"""
        now = now or utcnow()
        booking = self._get_renter_booking(booking_id, user)
        if booking.status not in BLOCKING_BOOKING_STATUSES:
            raise InvalidStateError(f"Cannot cancel a {booking.status} booking")
        if booking.end_time <= now:
            raise InvalidStateError("Cannot cancel a booking that has already ended")

        booking = self.repo.update(self.db, booking, status="cancelled")
        logger.info(f"🗑️ Booking {booking.id} cancelled by user {user.id}")

        spot_events.publish(booking.spot_id, BOOKING_UPDATED, {"booking_id": booking.id, "status": "cancelled"})
        return booking

    def complete(self, booking_id: int, user: User) -> Booking:
        """Spot owner or admin marks an active booking completed"""
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.owner_id != user.id and not is_admin(self.db, user):
            raise UnauthorizedError("Only the spot owner or an admin can complete bookings")
        if booking.status != "active":
            raise InvalidStateError(f"Cannot complete a {booking.status} booking")

        booking = self.repo.update(self.db, booking, status="completed")
        spot_events.publish(booking.spot_id, BOOKING_UPDATED, {"booking_id": booking.id, "status": "completed"})
        return booking

    def complete_finished_bookings(self, now: Optional[datetime] = None) -> int:
        """Mark active bookings whose end has passed as completed"""
        now = now or utcnow()
        finished = self.repo.get_finished_active(self.db, now)
        for booking in finished:
            booking.status = "completed"
        self.db.commit()

        if finished:
            logger.info(f"✅ Completed {len(finished)} finished bookings")
        return len(finished)

    # Listings

    def list_user_bookings(self, user: User) -> list[Booking]:
        return self.repo.get_by_user(self.db, user.id)

    def list_owner_bookings(self, user: User) -> list[Booking]:
        return self.repo.get_by_owner(self.db, user.id, OWNER_BOOKINGS_LIMIT)
