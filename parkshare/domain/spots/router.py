"""Spot router - FastAPI endpoints for parking spots"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ..bookings.service import BookingService
from .schemas import AvailableSlotsResponse, SpotResponse, TimeSlot
from .service import SpotService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spots", tags=["Parking Spots"])


def get_spot_service(db: Session = Depends(get_db)) -> SpotService:
    """Dependency injection for SpotService"""
    return SpotService(db)


@router.get("", response_model=list[SpotResponse])
async def list_bookable_spots(
    city: Optional[str] = Query(None, description="Filter by city"),
    current_user: User = Depends(get_current_user),
    service: SpotService = Depends(get_spot_service),
):
    """Approved spots that are currently available"""
    return [SpotResponse.from_spot(s) for s in service.list_bookable(city)]


@router.get("/mine", response_model=list[SpotResponse])
async def list_my_spots(
    current_user: User = Depends(get_current_user),
    service: SpotService = Depends(get_spot_service),
):
    return [SpotResponse.from_spot(s) for s in service.list_owner_spots(current_user)]


@router.get("/all", response_model=list[SpotResponse])
async def list_all_spots(
    current_user: User = Depends(get_current_user),
    service: SpotService = Depends(get_spot_service),
):
    """Admin view of every spot"""
    return [SpotResponse.from_spot(s) for s in service.list_all_spots(current_user)]


@router.get("/{spot_id}", response_model=SpotResponse)
async def get_spot(
    spot_id: int,
    current_user: User = Depends(get_current_user),
    service: SpotService = Depends(get_spot_service),
):
    return SpotResponse.from_spot(service.get_spot(spot_id))


@router.get("/{spot_id}/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    spot_id: int,
    date: date = Query(..., description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Declared slots still free on the given date"""
    slots = BookingService(db).get_available_slots(spot_id, date)
    return AvailableSlotsResponse(
        spotId=spot_id, date=date.isoformat(), slots=[TimeSlot(**s) for s in slots]
    )


@router.delete("/{spot_id}")
async def delete_spot(
    spot_id: int,
    current_user: User = Depends(get_current_user),
    service: SpotService = Depends(get_spot_service),
):
    """Delete a spot (owner or admin)"""
    return service.delete_spot(spot_id, current_user)
