"""Request router - owner submissions and admin review endpoints"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import REQUEST_RATE_LIMIT
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AvailabilityRequestCreate,
    EditRequestCreate,
    NewSpotRequestCreate,
    RejectRequestBody,
    SpotRequestResponse,
)
from .service import RequestWorkflowService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spot-requests", tags=["Spot Requests"])

request_rate_limit = create_rate_limiter(
    limit=REQUEST_RATE_LIMIT, window_seconds=3600, key_prefix="spot_request"
)


def get_workflow_service(db: Session = Depends(get_db)) -> RequestWorkflowService:
    """Dependency injection for RequestWorkflowService"""
    return RequestWorkflowService(db)


# ============================================================================
# OWNER SUBMISSIONS
# ============================================================================


@router.post("/new-spot", response_model=SpotRequestResponse, status_code=201)
async def submit_new_spot_request(
    data: NewSpotRequestCreate,
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
    _: None = Depends(request_rate_limit),
):
    """Propose a new parking spot for admin approval"""
    spot_request = service.submit_new_spot_request(current_user, data)
    return SpotRequestResponse.from_request(spot_request)


@router.post("/edit", response_model=SpotRequestResponse, status_code=201)
async def submit_edit_request(
    data: EditRequestCreate,
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
    _: None = Depends(request_rate_limit),
):
    """Request changes to one of your live spots"""
    spot_request = service.submit_edit_request(current_user, data.spotId, data.changes)
    return SpotRequestResponse.from_request(spot_request)


@router.post("/availability", response_model=SpotRequestResponse, status_code=201)
async def submit_availability_update(
    data: AvailabilityRequestCreate,
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
    _: None = Depends(request_rate_limit),
):
    """Request to make one of your spots available or unavailable"""
    spot_request = service.submit_availability_update(
        current_user, data.spotId, data.requestedAvailability
    )
    return SpotRequestResponse.from_request(spot_request)


@router.get("/mine", response_model=list[SpotRequestResponse])
async def get_my_requests(
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
):
    return [SpotRequestResponse.from_request(r) for r in service.list_for_owner(current_user)]


# ============================================================================
# ADMIN REVIEW
# ============================================================================


@router.get("/pending", response_model=list[SpotRequestResponse])
async def get_pending_requests(
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
):
    """Pending requests, oldest first (admin only)"""
    return [SpotRequestResponse.from_request(r) for r in service.list_pending(current_user)]


@router.get("/{request_id}", response_model=SpotRequestResponse)
async def get_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
):
    return SpotRequestResponse.from_request(service.get_request(request_id, current_user))


@router.post("/{request_id}/approve", response_model=SpotRequestResponse)
async def approve_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
):
    return SpotRequestResponse.from_request(service.approve(current_user, request_id))


@router.post("/{request_id}/reject", response_model=SpotRequestResponse)
async def reject_request(
    request_id: int,
    data: RejectRequestBody,
    current_user: User = Depends(get_current_user),
    service: RequestWorkflowService = Depends(get_workflow_service),
):
    return SpotRequestResponse.from_request(
        service.reject(current_user, request_id, data.reason)
    )
