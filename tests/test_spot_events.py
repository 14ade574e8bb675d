from datetime import date

from parkshare.domain.bookings.schemas import BookingCreate
from parkshare.domain.bookings.service import BookingService
from parkshare.domain.requests.service import RequestWorkflowService
from parkshare.domain.spots.events import (
    BOOKING_CREATED,
    BOOKING_UPDATED,
    SPOT_UPDATED,
    SpotEventBus,
    spot_events,
)
from parkshare.domain.spots.schemas import SpotFields

from .conftest import NOW


def test_subscriber_receives_events_for_its_spot_only():
    bus = SpotEventBus()
    seen = []
    bus.on_change(1, seen.append)

    bus.publish(1, SPOT_UPDATED, {"field": "price"})
    bus.publish(2, SPOT_UPDATED)

    assert [(e.spot_id, e.kind, e.payload) for e in seen] == [(1, SPOT_UPDATED, {"field": "price"})]


def test_unsubscribe_stops_delivery():
    bus = SpotEventBus()
    seen = []
    unsubscribe = bus.on_change(1, seen.append)

    unsubscribe()
    bus.publish(1, SPOT_UPDATED)

    assert seen == []
    assert bus.subscriber_count(1) == 0
    # A second call is harmless
    unsubscribe()


def test_failing_subscriber_does_not_block_others():
    bus = SpotEventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.on_change(1, broken)
    bus.on_change(1, seen.append)

    event = bus.publish(1, BOOKING_CREATED)

    assert seen == [event]


def test_reservation_and_payment_publish_events(db, driver, make_spot):
    spot = make_spot()
    seen = []
    spot_events.on_change(spot.id, seen.append)
    service = BookingService(db)

    booking = service.reserve(
        BookingCreate(spotId=spot.id, date=date(2030, 1, 14), startTime="09:00"), driver, now=NOW
    )
    service.confirm_payment(booking.id, driver)

    assert [e.kind for e in seen] == [BOOKING_CREATED, BOOKING_UPDATED]
    assert seen[1].payload == {"booking_id": booking.id, "status": "active"}


def test_approved_edit_publishes_spot_update(db, owner, admin, make_spot):
    spot = make_spot()
    seen = []
    spot_events.on_change(spot.id, seen.append)
    workflow = RequestWorkflowService(db)

    req = workflow.submit_availability_update(owner, spot.id, "unavailable")
    assert seen == []

    workflow.approve(admin, req.id)

    assert [e.kind for e in seen] == [SPOT_UPDATED]
    assert seen[0].payload == {"request_id": req.id}


def test_rejected_request_publishes_nothing(db, owner, admin, make_spot):
    spot = make_spot()
    seen = []
    spot_events.on_change(spot.id, seen.append)
    workflow = RequestWorkflowService(db)

    req = workflow.submit_edit_request(owner, spot.id, SpotFields(name="Renamed"))
    workflow.reject(admin, req.id, "Name already taken")

    assert seen == []
