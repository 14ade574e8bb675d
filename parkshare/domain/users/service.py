"""
User service - profile reads and role assignment.

New accounts start as drivers. Right after first sign-in a user may pick
driver or space_owner once; every later change, and any grant of admin, goes
through an admin.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ROLE_ADMIN, ROLES, SELF_SERVICE_ROLES, User
from ...shared.exceptions import InvalidStateError, NotFoundError, ValidationError
from .guards import load_caller, require_admin
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user records"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def get_profile(self, user: User) -> User:
        return load_caller(self.db, user)

    def choose_role(self, user: User, role: str) -> User:
        """One-time self-service choice between driver and space_owner"""
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError("Role must be 'driver' or 'space_owner'")

        record = load_caller(self.db, user)
        if record.role == ROLE_ADMIN:
            raise InvalidStateError("Admin roles are managed by other admins")
        if record.role_selected:
            raise InvalidStateError("Role has already been chosen; ask an admin to change it")

        record = self.repo.update(self.db, record, role=role, role_selected=True)
        logger.info(f"👤 User {record.id} chose role {role}")
        return record

    def list_users(self, user: User, role: Optional[str] = None) -> list[User]:
        require_admin(self.db, user)
        return self.repo.get_all(self.db, role)

    def set_role(self, user: User, user_id: int, role: str) -> User:
        """Admin assigns any role to another user"""
        admin = require_admin(self.db, user)
        if role not in ROLES:
            raise ValidationError(f"Unknown role: {role}")

        target = self.repo.get_user_by_id(self.db, user_id)
        if not target:
            raise NotFoundError("User not found")
        if target.id == admin.id and role != ROLE_ADMIN:
            raise InvalidStateError("Admins cannot remove their own admin role")

        target = self.repo.update(self.db, target, role=role, role_selected=True)
        logger.info(f"👤 Admin {admin.id} set role of user {target.id} to {role}")
        return target

    def set_role_by_email(self, email: str, role: str) -> User:
        """Operator path used by the update_user_role script, e.g. to seed the first admin"""
        if role not in ROLES:
            raise ValidationError(f"Unknown role: {role}")

        target = self.repo.get_user_by_email(self.db, email)
        if not target:
            raise NotFoundError(f"No user with email {email}; they must sign in once first")

        target = self.repo.update(self.db, target, role=role, role_selected=True)
        logger.info(f"👤 Role of user {target.id} set to {role} by operator")
        return target
