"""Slot availability resolution.

Declared slots are recurring wall-clock windows. For a concrete date each slot
becomes a half-open [start, end) interval and is offered only if it has not
started yet and no forward-looking pending/active booking overlaps it. A
partial overlap removes the whole slot; free time inside a slot is never
split out.
"""

from datetime import date, datetime
from typing import Iterable

from ...models import BLOCKING_BOOKING_STATUSES, WEEKDAYS
from ...shared.validators import parse_wall_time


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap"""
    return start_a < end_b and start_b < end_a


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def spot_open_on(spot, day: date) -> bool:
    """A spot with no declared days is treated as open every day"""
    days = spot.days or []
    return not days or weekday_name(day) in days


def is_bookable(spot) -> bool:
    return spot.status == "approved" and spot.availability == "available"


def slot_interval(day: date, slot: dict) -> tuple[datetime, datetime]:
    start = datetime.combine(day, parse_wall_time(slot["start"]))
    end = datetime.combine(day, parse_wall_time(slot["end"]))
    return start, end


def resolve_available_slots(spot, day: date, bookings: Iterable, now: datetime) -> list[dict]:
    """Declared slots of ``spot`` still free on ``day``, in declared order.

    Slots that have already started are never offered.

    ``bookings`` may contain anything for the spot; only pending/active ones
    starting at or after ``now`` block a slot.
    """
    slots = spot.time_slots or []
    if not slots or not is_bookable(spot) or not spot_open_on(spot, day):
        return []

    blocking = [
        b
        for b in bookings
        if b.status in BLOCKING_BOOKING_STATUSES and b.start_time >= now
    ]

    available = []
    for slot in slots:
        slot_start, slot_end = slot_interval(day, slot)
        if slot_start <= now:
            continue
        if any(overlaps(slot_start, slot_end, b.start_time, b.end_time) for b in blocking):
            continue
        available.append({"start": slot["start"], "end": slot["end"]})

    return available
