"""Spot repository - Database operations for parking spots"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ParkingSpot


class SpotRepository:
    """Repository for parking spot database operations"""

    @staticmethod
    def get_spot(db: Session, spot_id: int) -> Optional[ParkingSpot]:
        return db.query(ParkingSpot).filter(ParkingSpot.id == spot_id).first()

    @staticmethod
    def get_spot_for_update(db: Session, spot_id: int) -> Optional[ParkingSpot]:
        """Load a spot and lock its row until the transaction ends"""
        return db.query(ParkingSpot).filter(ParkingSpot.id == spot_id).with_for_update().first()

    @staticmethod
    def query_by_owner(db: Session, owner_id: int) -> list[ParkingSpot]:
        return (
            db.query(ParkingSpot)
            .filter(ParkingSpot.owner_id == owner_id)
            .order_by(ParkingSpot.created_at.desc(), ParkingSpot.id.desc())
            .all()
        )

    @staticmethod
    def query_bookable(db: Session, city: Optional[str] = None) -> list[ParkingSpot]:
        query = db.query(ParkingSpot).filter(
            ParkingSpot.status == "approved", ParkingSpot.availability == "available"
        )
        if city:
            query = query.filter(ParkingSpot.city.ilike(city.strip()))
        return query.order_by(ParkingSpot.name).all()

    @staticmethod
    def get_all(db: Session) -> list[ParkingSpot]:
        return db.query(ParkingSpot).order_by(ParkingSpot.id).all()

    @staticmethod
    def create(db: Session, **spot_data) -> ParkingSpot:
        """Stage a new spot; the caller commits"""
        spot = ParkingSpot(**spot_data)
        db.add(spot)
        db.flush()
        return spot

    @staticmethod
    def update(db: Session, spot: ParkingSpot, **updates) -> ParkingSpot:
        """Stage field updates; the caller commits"""
        for key, value in updates.items():
            if hasattr(spot, key):
                setattr(spot, key, value)
        db.flush()
        return spot

    @staticmethod
    def delete(db: Session, spot: ParkingSpot) -> None:
        db.delete(spot)
        db.commit()
