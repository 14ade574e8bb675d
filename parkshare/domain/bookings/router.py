"""Booking router - FastAPI endpoints for reservations and booking lifecycle"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import BOOKING_RATE_LIMIT
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...shared.validators import utcnow
from .schemas import BookingCreate, BookingResponse
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])

booking_rate_limit = create_rate_limiter(
    limit=BOOKING_RATE_LIMIT, window_seconds=60, key_prefix="booking"
)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


@router.post("", response_model=BookingResponse, status_code=201)
async def reserve_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(booking_rate_limit),
):
    """Reserve a free slot; the booking starts pending until payment succeeds"""
    booking = service.reserve(data, current_user)
    return BookingResponse.from_booking(booking, utcnow())


@router.get("/mine", response_model=list[BookingResponse])
async def get_my_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    now = utcnow()
    return [BookingResponse.from_booking(b, now) for b in service.list_user_bookings(current_user)]


@router.get("/received", response_model=list[BookingResponse])
async def get_received_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings on the current user's spots, most recent first"""
    now = utcnow()
    return [BookingResponse.from_booking(b, now) for b in service.list_owner_bookings(current_user)]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.get_booking(booking_id, current_user), utcnow())


@router.post("/{booking_id}/payment/confirm", response_model=BookingResponse)
async def confirm_payment(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.confirm_payment(booking_id, current_user), utcnow())


@router.post("/{booking_id}/payment/fail", response_model=BookingResponse)
async def fail_payment(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.fail_payment(booking_id, current_user), utcnow())


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.cancel(booking_id, current_user), utcnow())


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.complete(booking_id, current_user), utcnow())
