from datetime import date, datetime

import pytest

from parkshare.domain.bookings.schemas import BookingCreate
from parkshare.domain.bookings.service import BookingService
from parkshare.models import Notification
from parkshare.shared.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

from .conftest import NOW

MONDAY = date(2030, 1, 14)


def request(spot, start="09:00", hours=1, day=MONDAY):
    return BookingCreate(spotId=spot.id, date=day, startTime=start, durationHours=hours)


class TestReserve:
    def test_reserve_creates_pending_booking(self, db, driver, owner, make_spot):
        spot = make_spot()

        booking = BookingService(db).reserve(request(spot, hours=2), driver, now=NOW)

        assert booking.id is not None
        assert booking.status == "pending"
        assert booking.payment_status == "pending"
        assert booking.start_time == datetime(2030, 1, 14, 9, 0)
        assert booking.end_time == datetime(2030, 1, 14, 11, 0)
        assert booking.total_amount == 9.0
        assert booking.owner_id == owner.id
        assert booking.spot_name == spot.name
        assert booking.user_email == driver.email

    def test_reserve_notifies_owner(self, db, driver, owner, make_spot):
        spot = make_spot()
        BookingService(db).reserve(request(spot), driver, now=NOW)

        notes = db.query(Notification).filter(Notification.user_id == owner.id).all()
        assert [n.title for n in notes] == ["New Booking"]

    def test_overlapping_reservation_conflicts(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        service.reserve(request(spot, hours=2), driver, now=NOW)

        with pytest.raises(ConflictError):
            service.reserve(request(spot, start="09:00"), driver, now=NOW)

    def test_conflict_leaves_single_booking(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        service.reserve(request(spot), driver, now=NOW)

        with pytest.raises(ConflictError):
            service.reserve(request(spot), driver, now=NOW)

        assert len(service.list_user_bookings(driver)) == 1

    def test_adjacent_reservation_is_allowed(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        service.reserve(request(spot, start="09:00", hours=4), driver, now=NOW)

        # 09:00-13:00 ends exactly where the afternoon slot starts
        booking = service.reserve(request(spot, start="13:00"), driver, now=NOW)
        assert booking.start_time == datetime(2030, 1, 14, 13, 0)

    def test_failed_payment_releases_range(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        first = service.reserve(request(spot), driver, now=NOW)
        service.fail_payment(first.id, driver)

        second = service.reserve(request(spot), driver, now=NOW)
        assert second.id != first.id

    def test_start_must_match_a_declared_slot(self, db, driver, make_spot):
        spot = make_spot()
        with pytest.raises(ValidationError):
            BookingService(db).reserve(request(spot, start="10:00"), driver, now=NOW)

    def test_start_must_be_in_the_future(self, db, driver, make_spot):
        spot = make_spot()
        now = datetime(2030, 1, 14, 9, 30)
        with pytest.raises(ValidationError):
            BookingService(db).reserve(request(spot), driver, now=now)

    def test_closed_day_is_rejected(self, db, driver, make_spot):
        spot = make_spot(days=["Tuesday"])
        with pytest.raises(ValidationError):
            BookingService(db).reserve(request(spot), driver, now=NOW)

    @pytest.mark.parametrize("hours", [0, 25])
    def test_duration_bounds(self, db, driver, make_spot, hours):
        spot = make_spot()
        with pytest.raises(ValidationError):
            BookingService(db).reserve(request(spot, hours=hours), driver, now=NOW)

    @pytest.mark.parametrize(
        "overrides", [{"availability": "unavailable"}, {"status": "pending"}]
    )
    def test_unbookable_spot(self, db, driver, make_spot, overrides):
        spot = make_spot(**overrides)
        with pytest.raises(InvalidStateError):
            BookingService(db).reserve(request(spot), driver, now=NOW)

    def test_unknown_spot(self, db, driver, make_spot):
        spot = make_spot()
        data = BookingCreate(spotId=spot.id + 100, date=MONDAY, startTime="09:00")
        with pytest.raises(NotFoundError):
            BookingService(db).reserve(data, driver, now=NOW)

    def test_reserved_slot_disappears_from_availability(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        service.reserve(request(spot, start="13:00"), driver, now=NOW)

        assert service.get_available_slots(spot.id, MONDAY, now=NOW) == [
            {"start": "09:00", "end": "12:00"}
        ]


class TestLifecycle:
    def test_confirm_payment_activates_and_notifies(self, db, driver, owner, make_spot):
        spot = make_spot()
        service = BookingService(db)
        booking = service.reserve(request(spot, hours=2), driver, now=NOW)

        booking = service.confirm_payment(booking.id, driver)

        assert booking.status == "active"
        assert booking.payment_status == "completed"
        titles = [n.title for n in db.query(Notification).filter(Notification.user_id == owner.id)]
        assert "Payment Received" in titles
        payment = db.query(Notification).filter(Notification.title == "Payment Received").one()
        assert payment.message == "Payment of £9.00 received for Station Road"

    def test_confirm_payment_twice_is_invalid(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        booking = service.reserve(request(spot), driver, now=NOW)
        service.confirm_payment(booking.id, driver)

        with pytest.raises(InvalidStateError):
            service.confirm_payment(booking.id, driver)

    def test_only_renter_can_pay(self, db, driver, owner, make_spot):
        spot = make_spot()
        service = BookingService(db)
        booking = service.reserve(request(spot), driver, now=NOW)

        with pytest.raises(UnauthorizedError):
            service.confirm_payment(booking.id, owner)

    def test_fail_payment_cancels(self, db, driver, make_spot):
        spot = make_spot()
        service = BookingService(db)
        booking = service.fail_payment(service.reserve(request(spot), driver, now=NOW).id, driver)

        assert booking.status == "cancelled"
        assert booking.payment_status == "failed"

    def test_cancel_active_booking(self, db, driver, make_spot, make_booking):
        booking = make_booking(make_spot(), datetime(2030, 1, 14, 9, 0))

        cancelled = BookingService(db).cancel(booking.id, driver, now=NOW)

        assert cancelled.status == "cancelled"

    def test_cannot_cancel_finished_booking(self, db, driver, make_spot, make_booking):
        booking = make_booking(make_spot(), datetime(2030, 1, 1, 9, 0))
        with pytest.raises(InvalidStateError):
            BookingService(db).cancel(booking.id, driver, now=NOW)

    def test_owner_completes_active_booking(self, db, owner, make_spot, make_booking):
        booking = make_booking(make_spot(), datetime(2030, 1, 1, 9, 0))
        assert BookingService(db).complete(booking.id, owner).status == "completed"

    def test_other_owner_cannot_complete(self, db, other_owner, make_spot, make_booking):
        booking = make_booking(make_spot(), datetime(2030, 1, 1, 9, 0))
        with pytest.raises(UnauthorizedError):
            BookingService(db).complete(booking.id, other_owner)

    def test_admin_can_view_any_booking(self, db, admin, other_owner, make_spot, make_booking):
        booking = make_booking(make_spot(), datetime(2030, 1, 14, 9, 0))
        service = BookingService(db)

        assert service.get_booking(booking.id, admin).id == booking.id
        with pytest.raises(UnauthorizedError):
            service.get_booking(booking.id, other_owner)

    def test_complete_finished_bookings(self, db, make_spot, make_booking):
        spot = make_spot()
        finished = make_booking(spot, datetime(2030, 1, 6, 9, 0))
        running = make_booking(spot, datetime(2030, 1, 7, 7, 30), hours=2)
        pending = make_booking(spot, datetime(2030, 1, 5, 9, 0), status="pending", payment_status="pending")

        assert BookingService(db).complete_finished_bookings(now=NOW) == 1

        db.refresh(finished)
        db.refresh(running)
        db.refresh(pending)
        assert finished.status == "completed"
        assert running.status == "active"
        assert pending.status == "pending"


class TestListings:
    def test_user_bookings_newest_start_first(self, db, driver, make_spot, make_booking):
        spot = make_spot()
        early = make_booking(spot, datetime(2030, 1, 14, 9, 0))
        late = make_booking(spot, datetime(2030, 1, 15, 9, 0))

        ids = [b.id for b in BookingService(db).list_user_bookings(driver)]
        assert ids == [late.id, early.id]

    def test_owner_sees_received_bookings(self, db, owner, other_owner, make_spot, make_booking):
        booking = make_booking(make_spot(), datetime(2030, 1, 14, 9, 0))
        service = BookingService(db)

        assert [b.id for b in service.list_owner_bookings(owner)] == [booking.id]
        assert service.list_owner_bookings(other_owner) == []
