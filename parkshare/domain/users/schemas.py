"""User domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    id: int
    email: str
    displayName: Optional[str] = None
    phoneNumber: Optional[str] = None
    role: str
    roleSelected: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            displayName=user.display_name,
            phoneNumber=user.phone_number,
            role=user.role,
            roleSelected=bool(user.role_selected),
            createdAt=user.created_at,
        )
