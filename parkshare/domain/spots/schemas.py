"""Spot domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_time_slot


class TimeSlot(BaseModel):
    """A recurring wall-clock window, e.g. 09:00-12:00"""

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def strip_value(cls, v):
        return v.strip()


class SpotFields(BaseModel):
    """Owner-supplied spot fields.

    Everything is optional at the schema level; required-field and range checks
    happen in the service so partial edits can be validated against the
    current spot.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    pricePerHour: Optional[float] = None
    imageUrl: Optional[str] = None
    days: Optional[list[str]] = None
    timeSlots: Optional[list[TimeSlot]] = None

    def to_record(self, only_set: bool = False) -> dict:
        """Convert to the snake_case dict stored on spots and requests"""
        data = self.model_dump(exclude_unset=only_set)
        mapping = {
            "name": "name",
            "description": "description",
            "address": "address",
            "city": "city",
            "pricePerHour": "price_per_hour",
            "imageUrl": "image_url",
            "days": "days",
            "timeSlots": "time_slots",
        }
        return {mapping[key]: value for key, value in data.items()}


class SpotResponse(BaseModel):
    """Schema for spot response"""

    id: int
    ownerId: int
    name: str
    description: Optional[str]
    address: str
    city: str
    pricePerHour: float
    imageUrl: Optional[str]
    days: list[str]
    timeSlots: list[TimeSlot]
    availability: str
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_spot(cls, spot) -> "SpotResponse":
        return cls(
            id=spot.id,
            ownerId=spot.owner_id,
            name=spot.name,
            description=spot.description,
            address=spot.address,
            city=spot.city,
            pricePerHour=spot.price_per_hour,
            imageUrl=spot.image_url,
            days=spot.days or [],
            timeSlots=[TimeSlot(**slot) for slot in (spot.time_slots or [])],
            availability=spot.availability,
            status=spot.status,
            createdAt=spot.created_at,
            updatedAt=spot.updated_at,
        )


class AvailableSlotsResponse(BaseModel):
    spotId: int
    date: str
    slots: list[TimeSlot]


def normalize_time_slots(slots: list) -> list[dict]:
    """Validate declared slots, returning plain dicts in declared order"""
    normalized = []
    for slot in slots:
        start = slot["start"] if isinstance(slot, dict) else slot.start
        end = slot["end"] if isinstance(slot, dict) else slot.end
        start, end = validate_time_slot(start, end)
        normalized.append({"start": start, "end": end})
    return normalized
