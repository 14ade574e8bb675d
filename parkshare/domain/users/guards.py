"""Authorization guards.

Roles are read from the stored user record on every check rather than trusted
from the token or the in-memory caller object.
"""

import logging

from sqlalchemy.orm import Session

from ...models import ROLE_ADMIN, ParkingSpot, User
from ...shared.exceptions import NotFoundError, UnauthorizedError
from .repository import UserRepository

logger = logging.getLogger(__name__)


def load_caller(db: Session, caller: User) -> User:
    """Re-read the caller's user record"""
    record = UserRepository.get_user_by_id(db, caller.id)
    if not record:
        raise NotFoundError("User not found")
    return record


def is_admin(db: Session, caller: User) -> bool:
    record = UserRepository.get_user_by_id(db, caller.id)
    return bool(record and record.role == ROLE_ADMIN)


def require_admin(db: Session, caller: User) -> User:
    record = load_caller(db, caller)
    if record.role != ROLE_ADMIN:
        logger.warning(f"🚫 User {caller.id} attempted an admin-only operation")
        raise UnauthorizedError("Only admins can perform this action")
    return record


def require_spot_owner(caller: User, spot: ParkingSpot) -> None:
    if spot.owner_id != caller.id:
        logger.warning(f"🚫 User {caller.id} does not own spot {spot.id}")
        raise UnauthorizedError("You do not own this spot")


def require_spot_owner_or_admin(db: Session, caller: User, spot: ParkingSpot) -> None:
    if spot.owner_id == caller.id:
        return
    if not is_admin(db, caller):
        logger.warning(f"🚫 User {caller.id} cannot manage spot {spot.id}")
        raise UnauthorizedError("Only the spot owner or an admin can do this")
