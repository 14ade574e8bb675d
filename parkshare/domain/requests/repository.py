"""Request repository - Database operations for parking spot requests"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ParkingSpotRequest


class RequestRepository:
    """Repository for parking spot request database operations"""

    @staticmethod
    def create(db: Session, **request_data) -> ParkingSpotRequest:
        spot_request = ParkingSpotRequest(**request_data)
        db.add(spot_request)
        db.commit()
        db.refresh(spot_request)
        return spot_request

    @staticmethod
    def get_request(db: Session, request_id: int) -> Optional[ParkingSpotRequest]:
        return db.query(ParkingSpotRequest).filter(ParkingSpotRequest.id == request_id).first()

    @staticmethod
    def get_request_for_update(db: Session, request_id: int) -> Optional[ParkingSpotRequest]:
        return (
            db.query(ParkingSpotRequest)
            .filter(ParkingSpotRequest.id == request_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def query_pending(db: Session) -> list[ParkingSpotRequest]:
        return (
            db.query(ParkingSpotRequest)
            .filter(ParkingSpotRequest.status == "pending")
            .order_by(ParkingSpotRequest.created_at.asc(), ParkingSpotRequest.id.asc())
            .all()
        )

    @staticmethod
    def query_by_owner(db: Session, owner_id: int) -> list[ParkingSpotRequest]:
        return (
            db.query(ParkingSpotRequest)
            .filter(ParkingSpotRequest.owner_id == owner_id)
            .order_by(ParkingSpotRequest.created_at.desc(), ParkingSpotRequest.id.desc())
            .all()
        )

    @staticmethod
    def update_status(
        db: Session,
        spot_request: ParkingSpotRequest,
        status: str,
        reviewer_id: int,
        reviewed_at,
        reason: Optional[str] = None,
    ) -> ParkingSpotRequest:
        """Stage the review outcome; the caller commits"""
        spot_request.status = status
        spot_request.reviewed_by = reviewer_id
        spot_request.reviewed_at = reviewed_at
        spot_request.rejection_reason = reason
        db.flush()
        return spot_request
