"""Spot service - Business logic for parking spot reads and removal.

Live spots are only created or changed through approved requests; the
workflow engine calls the apply_* helpers inside its own transaction.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ParkingSpot, User
from ...shared.exceptions import NotFoundError
from ..users.guards import require_admin, require_spot_owner_or_admin
from .events import SPOT_DELETED, spot_events
from .repository import SpotRepository

logger = logging.getLogger(__name__)

SPOT_FIELDS = (
    "name",
    "description",
    "address",
    "city",
    "price_per_hour",
    "image_url",
    "days",
    "time_slots",
)


def snapshot_spot(spot: ParkingSpot) -> dict:
    """Owner-editable fields of a spot as a plain dict"""
    return {
        "name": spot.name,
        "description": spot.description,
        "address": spot.address,
        "city": spot.city,
        "price_per_hour": spot.price_per_hour,
        "image_url": spot.image_url,
        "days": list(spot.days or []),
        "time_slots": [dict(slot) for slot in (spot.time_slots or [])],
    }


class SpotService:
    """Service layer for parking spot business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SpotRepository()

    def get_spot(self, spot_id: int) -> ParkingSpot:
        spot = self.repo.get_spot(self.db, spot_id)
        if not spot:
            raise NotFoundError("Parking spot not found")
        return spot

    def list_bookable(self, city: Optional[str] = None) -> list[ParkingSpot]:
        return self.repo.query_bookable(self.db, city)

    def list_owner_spots(self, user: User) -> list[ParkingSpot]:
        return self.repo.query_by_owner(self.db, user.id)

    def list_all_spots(self, user: User) -> list[ParkingSpot]:
        require_admin(self.db, user)
        return self.repo.get_all(self.db)

    def delete_spot(self, spot_id: int, user: User) -> dict:
        """Delete a spot. Bookings and requests that reference it are left alone."""
        spot = self.get_spot(spot_id)
        require_spot_owner_or_admin(self.db, user, spot)

        self.repo.delete(self.db, spot)
        logger.info(f"🗑️ Spot {spot_id} deleted by user {user.id}")

        spot_events.publish(spot_id, SPOT_DELETED)
        return {"message": "Parking spot deleted successfully"}

    # Staged mutations used by the request workflow (no commit)

    def apply_new_spot(self, owner_id: int, fields: dict) -> ParkingSpot:
        data = {key: fields.get(key) for key in SPOT_FIELDS}
        data["description"] = data["description"] or ""
        return self.repo.create(
            self.db,
            owner_id=owner_id,
            status="approved",
            availability="available",
            **data,
        )

    def apply_edit(self, spot: ParkingSpot, requested: dict) -> ParkingSpot:
        updates = {key: value for key, value in requested.items() if key in SPOT_FIELDS}
        return self.repo.update(self.db, spot, **updates)

    def apply_availability(self, spot: ParkingSpot, availability: str) -> ParkingSpot:
        return self.repo.update(self.db, spot, availability=availability)
