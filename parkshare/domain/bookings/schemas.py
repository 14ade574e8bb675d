"""Booking domain schemas - Pydantic models for validation"""

import datetime as dt
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_wall_time
from .status import derive_status


class BookingCreate(BaseModel):
    """Reserve a declared slot on a date for a whole number of hours"""

    spotId: int
    date: dt.date
    startTime: str  # HH:MM, must be the start of one of the spot's slots
    durationHours: int = 1

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        return parse_wall_time(v).strftime("%H:%M")


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    spotId: int
    spotName: Optional[str] = None
    ownerId: int
    userId: int
    userEmail: Optional[str] = None
    startTime: datetime
    endTime: datetime
    durationHours: int
    totalAmount: float
    paymentStatus: str
    status: str
    displayStatus: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking, now: datetime) -> "BookingResponse":
        return cls(
            id=booking.id,
            spotId=booking.spot_id,
            spotName=booking.spot_name,
            ownerId=booking.owner_id,
            userId=booking.user_id,
            userEmail=booking.user_email,
            startTime=booking.start_time,
            endTime=booking.end_time,
            durationHours=booking.duration_hours,
            totalAmount=booking.total_amount,
            paymentStatus=booking.payment_status,
            status=booking.status,
            displayStatus=derive_status(booking, now),
            createdAt=booking.created_at,
            updatedAt=booking.updated_at,
        )
