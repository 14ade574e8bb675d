"""
Request workflow engine.

Space owners never change live spots directly. They file a request
(new_spot, edit_spot or availability_update) which stays pending until an
admin approves or rejects it. Both outcomes are terminal. Approval applies
the payload to the spot store and marks the request approved in one
transaction; the owner is notified afterwards.
"""

import logging
import math
from numbers import Number
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ROLE_SPACE_OWNER, ParkingSpotRequest, User
from ...shared.exceptions import (
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ...shared.validators import normalize_weekdays, utcnow
from ..notifications.service import NotificationService
from ..spots.events import SPOT_CREATED, SPOT_UPDATED, spot_events
from ..spots.repository import SpotRepository
from ..spots.schemas import SpotFields, normalize_time_slots
from ..spots.service import SpotService, snapshot_spot
from ..users.guards import is_admin, load_caller, require_admin, require_spot_owner
from .repository import RequestRepository

logger = logging.getLogger(__name__)

AVAILABILITY_VALUES = ("available", "unavailable")


def validate_spot_fields(fields: dict) -> dict:
    """Check a complete set of spot fields and return them normalized.

    Raises:
        ValidationError: on the first missing or out-of-range field
    """
    data = dict(fields)

    for key in ("name", "address", "city"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Missing required field: {key}")
        data[key] = value.strip()

    price = data.get("price_per_hour")
    if price is None or isinstance(price, bool) or not isinstance(price, Number):
        raise ValidationError("Missing required field: price_per_hour")
    if not math.isfinite(price):
        raise ValidationError("Price per hour must be a finite number")
    if price < 0:
        raise ValidationError("Price per hour cannot be negative")
    data["price_per_hour"] = float(price)

    if not data.get("days"):
        raise ValidationError("At least one available day must be selected")
    if not data.get("time_slots"):
        raise ValidationError("At least one time slot must be provided")

    try:
        data["days"] = normalize_weekdays(data["days"])
        data["time_slots"] = normalize_time_slots(data["time_slots"])
    except (ValueError, KeyError, TypeError) as e:
        raise ValidationError(str(e)) from e

    data["description"] = (data.get("description") or "").strip()
    data["image_url"] = data.get("image_url") or None
    return data


class RequestWorkflowService:
    """Service layer for the spot request workflow"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RequestRepository()
        self.spot_repo = SpotRepository()
        self.spot_service = SpotService(db)
        self.notifications = NotificationService(db)

    def _require_space_owner(self, user: User) -> User:
        record = load_caller(self.db, user)
        if record.role != ROLE_SPACE_OWNER:
            raise UnauthorizedError("Only space owners can submit spot requests")
        return record

    def _get_owned_spot(self, spot_id: int, user: User):
        spot = self.spot_repo.get_spot(self.db, spot_id)
        if not spot:
            raise NotFoundError("Parking spot not found")
        require_spot_owner(user, spot)
        return spot

    # Submission

    def submit_new_spot_request(self, user: User, fields: SpotFields) -> ParkingSpotRequest:
        owner = self._require_space_owner(user)
        spot_data = validate_spot_fields(fields.to_record())

        spot_request = self.repo.create(
            self.db,
            type="new_spot",
            owner_id=owner.id,
            owner_email=owner.email,
            status="pending",
            spot_data=spot_data,
        )
        logger.info(f"📥 New spot request {spot_request.id} submitted by user {owner.id}")
        self.notifications.request_submitted(spot_data["name"])
        return spot_request

    def submit_edit_request(
        self, user: User, spot_id: int, changes: SpotFields
    ) -> ParkingSpotRequest:
        owner = self._require_space_owner(user)
        spot = self._get_owned_spot(spot_id, owner)

        requested = changes.to_record(only_set=True)
        if not requested:
            raise ValidationError("No changes requested")

        current = snapshot_spot(spot)
        merged = validate_spot_fields({**current, **requested})
        requested = {key: merged[key] for key in requested}

        spot_request = self.repo.create(
            self.db,
            type="edit_spot",
            owner_id=owner.id,
            owner_email=owner.email,
            spot_id=spot.id,
            status="pending",
            current_spot_data=current,
            requested_spot_data=requested,
        )
        logger.info(f"📥 Edit request {spot_request.id} for spot {spot.id} submitted by user {owner.id}")
        self.notifications.request_submitted(spot.name)
        return spot_request

    def submit_availability_update(
        self, user: User, spot_id: int, requested_availability: str
    ) -> ParkingSpotRequest:
        if requested_availability not in AVAILABILITY_VALUES:
            raise ValidationError("Availability must be 'available' or 'unavailable'")

        owner = self._require_space_owner(user)
        spot = self._get_owned_spot(spot_id, owner)
        if spot.availability == requested_availability:
            raise ValidationError(f"Spot is already {requested_availability}")

        spot_request = self.repo.create(
            self.db,
            type="availability_update",
            owner_id=owner.id,
            owner_email=owner.email,
            spot_id=spot.id,
            status="pending",
            current_availability=spot.availability,
            requested_availability=requested_availability,
        )
        logger.info(
            f"📥 Availability request {spot_request.id} for spot {spot.id}: "
            f"{spot.availability} -> {requested_availability}"
        )
        self.notifications.request_submitted(spot.name)
        return spot_request

    # Review

    def _get_pending_for_update(self, request_id: int) -> ParkingSpotRequest:
        spot_request = self.repo.get_request_for_update(self.db, request_id)
        if not spot_request:
            raise NotFoundError("Request not found")
        if spot_request.status != "pending":
            raise InvalidStateError(f"Request has already been {spot_request.status}")
        return spot_request

    def _subject(self, spot_request: ParkingSpotRequest) -> str:
        """Human readable name of what a request is about"""
        if spot_request.type == "new_spot":
            return f"spot {spot_request.spot_data.get('name')}"
        if spot_request.type == "edit_spot":
            return f"changes to {spot_request.current_spot_data.get('name')}"
        spot = self.spot_repo.get_spot(self.db, spot_request.spot_id)
        name = spot.name if spot else "your spot"
        return f"availability of {name}"

    def approve(self, user: User, request_id: int) -> ParkingSpotRequest:
        admin = require_admin(self.db, user)

        try:
            spot_request = self._get_pending_for_update(request_id)

            if spot_request.type == "new_spot":
                spot = self.spot_service.apply_new_spot(spot_request.owner_id, spot_request.spot_data)
                spot_request.spot_id = spot.id
                event = SPOT_CREATED
            elif spot_request.type in ("edit_spot", "availability_update"):
                spot = self.spot_repo.get_spot_for_update(self.db, spot_request.spot_id)
                if not spot:
                    raise NotFoundError("Parking spot not found")
                if spot_request.type == "edit_spot":
                    self.spot_service.apply_edit(spot, spot_request.requested_spot_data)
                else:
                    self.spot_service.apply_availability(spot, spot_request.requested_availability)
                event = SPOT_UPDATED
            else:
                raise InvalidStateError(f"Unknown request type: {spot_request.type}")

            self.repo.update_status(self.db, spot_request, "approved", admin.id, utcnow())
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(spot_request)
        logger.info(f"✅ Request {spot_request.id} ({spot_request.type}) approved by admin {admin.id}")

        spot_events.publish(spot_request.spot_id, event, {"request_id": spot_request.id})
        self.notifications.request_reviewed(spot_request.owner_id, self._subject(spot_request), True)
        return spot_request

    def reject(self, user: User, request_id: int, reason: Optional[str]) -> ParkingSpotRequest:
        admin = require_admin(self.db, user)

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A rejection reason is required")

        try:
            spot_request = self._get_pending_for_update(request_id)
            self.repo.update_status(self.db, spot_request, "rejected", admin.id, utcnow(), reason)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(spot_request)
        logger.info(f"🚫 Request {spot_request.id} rejected by admin {admin.id}: {reason}")

        self.notifications.request_reviewed(
            spot_request.owner_id, self._subject(spot_request), False, reason
        )
        return spot_request

    # Queries

    def list_pending(self, user: User) -> list[ParkingSpotRequest]:
        require_admin(self.db, user)
        return self.repo.query_pending(self.db)

    def list_for_owner(self, user: User) -> list[ParkingSpotRequest]:
        return self.repo.query_by_owner(self.db, user.id)

    def get_request(self, request_id: int, user: User) -> ParkingSpotRequest:
        spot_request = self.repo.get_request(self.db, request_id)
        if not spot_request:
            raise NotFoundError("Request not found")
        if spot_request.owner_id != user.id and not is_admin(self.db, user):
            raise UnauthorizedError("You cannot view this request")
        return spot_request
