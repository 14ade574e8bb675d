from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Roles: driver, space_owner, admin
ROLE_DRIVER = "driver"
ROLE_SPACE_OWNER = "space_owner"
ROLE_ADMIN = "admin"
ROLES = (ROLE_DRIVER, ROLE_SPACE_OWNER, ROLE_ADMIN)
# Roles a user may pick for themselves
SELF_SERVICE_ROLES = (ROLE_DRIVER, ROLE_SPACE_OWNER)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Bookings in these states hold their time range on the spot
BLOCKING_BOOKING_STATUSES = ("pending", "active")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    role = Column(String(20), default=ROLE_DRIVER, nullable=False)  # driver, space_owner, admin
    # Set once the user has picked driver or space_owner after first sign-in
    role_selected = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    spots = relationship("ParkingSpot", back_populates="owner")
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )


class ParkingSpot(Base):
    __tablename__ = "parking_spots"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    price_per_hour = Column(Float, nullable=False, default=0.0)
    image_url = Column(String(500), nullable=True)  # storage reference only
    days = Column(JSON, default=list, nullable=False)  # ["Monday", "Tuesday", ...]
    time_slots = Column(JSON, default=list, nullable=False)  # [{"start": "09:00", "end": "12:00"}]
    availability = Column(String(20), default="available", nullable=False)  # available, unavailable
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, rejected
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", back_populates="spots")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    # Plain references: deleting a spot leaves its bookings in place
    spot_id = Column(Integer, nullable=False, index=True)
    owner_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    duration_hours = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)  # frozen at booking time
    payment_status = Column(String(20), default="pending", nullable=False)  # pending, completed, failed
    status = Column(String(20), default="pending", nullable=False)  # pending, active, completed, cancelled
    spot_name = Column(String(255), nullable=True)
    user_email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class ParkingSpotRequest(Base):
    __tablename__ = "parking_spot_requests"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(30), nullable=False)  # new_spot, edit_spot, availability_update
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    owner_email = Column(String(255), nullable=True)
    spot_id = Column(Integer, nullable=True, index=True)  # set for edit/availability requests
    status = Column(String(20), default="pending", nullable=False, index=True)

    # new_spot payload
    spot_data = Column(JSON, nullable=True)
    # edit_spot payload
    current_spot_data = Column(JSON, nullable=True)
    requested_spot_data = Column(JSON, nullable=True)
    # availability_update payload
    current_availability = Column(String(20), nullable=True)
    requested_availability = Column(String(20), nullable=True)

    reviewed_by = Column(Integer, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(10), default="unread", nullable=False)  # unread, read
    # request, approval, rejection, booking, default
    notification_type = Column(String(20), default="default", nullable=False)
    action = Column(JSON, nullable=True)  # {"type": "view", "link": "/dashboard/bookings"}
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="notifications")
