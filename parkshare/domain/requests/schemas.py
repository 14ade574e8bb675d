"""Request domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..spots.schemas import SpotFields

_CAMEL = {
    "name": "name",
    "description": "description",
    "address": "address",
    "city": "city",
    "price_per_hour": "pricePerHour",
    "image_url": "imageUrl",
    "days": "days",
    "time_slots": "timeSlots",
}


def spot_data_to_camel(data: Optional[dict]) -> Optional[dict]:
    if data is None:
        return None
    return {_CAMEL.get(key, key): value for key, value in data.items()}


class NewSpotRequestCreate(SpotFields):
    """Full proposed spot"""


class EditRequestCreate(BaseModel):
    spotId: int
    changes: SpotFields


class AvailabilityRequestCreate(BaseModel):
    spotId: int
    requestedAvailability: str  # available, unavailable


class RejectRequestBody(BaseModel):
    reason: Optional[str] = None


class SpotRequestResponse(BaseModel):
    """Schema for request response"""

    id: int
    type: str
    ownerId: int
    ownerEmail: Optional[str] = None
    spotId: Optional[int] = None
    status: str
    spotData: Optional[dict] = None
    currentSpotData: Optional[dict] = None
    requestedSpotData: Optional[dict] = None
    currentAvailability: Optional[str] = None
    requestedAvailability: Optional[str] = None
    reviewedBy: Optional[int] = None
    reviewedAt: Optional[datetime] = None
    rejectionReason: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_request(cls, r) -> "SpotRequestResponse":
        return cls(
            id=r.id,
            type=r.type,
            ownerId=r.owner_id,
            ownerEmail=r.owner_email,
            spotId=r.spot_id,
            status=r.status,
            spotData=spot_data_to_camel(r.spot_data),
            currentSpotData=spot_data_to_camel(r.current_spot_data),
            requestedSpotData=spot_data_to_camel(r.requested_spot_data),
            currentAvailability=r.current_availability,
            requestedAvailability=r.requested_availability,
            reviewedBy=r.reviewed_by,
            reviewedAt=r.reviewed_at,
            rejectionReason=r.rejection_reason,
            createdAt=r.created_at,
        )
