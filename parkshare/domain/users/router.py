"""User router - profile and role endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import RoleUpdate, UserResponse
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_profile(current_user))


@router.put("/me/role", response_model=UserResponse)
async def choose_my_role(
    data: RoleUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Pick driver or space_owner once after first sign-in"""
    return UserResponse.from_user(service.choose_role(current_user, data.role))


# ============================================================================
# ADMIN
# ============================================================================


@router.get("", response_model=list[UserResponse])
async def list_users(
    role: Optional[str] = Query(None, description="driver, space_owner or admin"),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return [UserResponse.from_user(u) for u in service.list_users(current_user, role)]


@router.put("/{user_id}/role", response_model=UserResponse)
async def set_user_role(
    user_id: int,
    data: RoleUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Change any user's role (admin only)"""
    return UserResponse.from_user(service.set_role(current_user, user_id, data.role))
