import os

# Configure before the package reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("REDIS_URL", None)

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from parkshare.auth import get_current_user  # noqa: E402
from parkshare.database import Base, SessionLocal, engine, get_db  # noqa: E402
from parkshare.domain.spots.events import spot_events  # noqa: E402
from parkshare.main import app  # noqa: E402
from parkshare.models import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_DRIVER,
    ROLE_SPACE_OWNER,
    Booking,
    ParkingSpot,
    User,
)

ALL_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# A fixed clock for service-level tests: Monday 2030-01-07 08:00
NOW = datetime(2030, 1, 7, 8, 0)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        spot_events.clear()


def _make_user(db, name: str, role: str) -> User:
    user = User(firebase_uid=f"uid-{name}", email=f"{name}@example.com", display_name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def driver(db):
    return _make_user(db, "driver", ROLE_DRIVER)


@pytest.fixture
def owner(db):
    return _make_user(db, "owner", ROLE_SPACE_OWNER)


@pytest.fixture
def other_owner(db):
    return _make_user(db, "other-owner", ROLE_SPACE_OWNER)


@pytest.fixture
def admin(db):
    return _make_user(db, "admin", ROLE_ADMIN)


@pytest.fixture
def make_spot(db, owner):
    def factory(**overrides) -> ParkingSpot:
        data = {
            "owner_id": owner.id,
            "name": "Station Road",
            "description": "Covered bay",
            "address": "1 Station Road",
            "city": "Leeds",
            "price_per_hour": 4.5,
            "days": list(ALL_DAYS),
            "time_slots": [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "17:00"}],
            "availability": "available",
            "status": "approved",
        }
        data.update(overrides)
        spot = ParkingSpot(**data)
        db.add(spot)
        db.commit()
        db.refresh(spot)
        return spot

    return factory


@pytest.fixture
def make_booking(db, driver):
    def factory(spot, start: datetime, hours: int = 1, **overrides) -> Booking:
        data = {
            "spot_id": spot.id,
            "owner_id": spot.owner_id,
            "user_id": driver.id,
            "start_time": start,
            "end_time": start + timedelta(hours=hours),
            "duration_hours": hours,
            "total_amount": spot.price_per_hour * hours,
            "payment_status": "completed",
            "status": "active",
            "spot_name": spot.name,
            "user_email": driver.email,
        }
        data.update(overrides)
        booking = Booking(**data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return factory


class AuthState:
    user = None


@pytest.fixture
def client(db):
    auth = AuthState()

    def override_get_db():
        yield db

    def override_get_current_user():
        return auth.user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    test_client = TestClient(app)

    def login(user):
        auth.user = user
        return test_client

    test_client.login = login
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()
