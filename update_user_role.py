"""
Set a user's role from the command line, e.g. to seed the first admin.
The user must have signed in once so their record exists.

Usage: python update_user_role.py <email> <driver|space_owner|admin>
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from fastapi import HTTPException  # noqa: E402

from parkshare.database import SessionLocal  # noqa: E402
from parkshare.domain.users.service import UserService  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def update_user_role(email: str, role: str) -> None:
    db = SessionLocal()
    try:
        user = UserService(db).set_role_by_email(email, role)
        logger.info(f"✅ {user.email} is now {user.role}")
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        logger.error("Usage: python update_user_role.py <email> <driver|space_owner|admin>")
        sys.exit(1)

    try:
        update_user_role(sys.argv[1], sys.argv[2])
    except HTTPException as e:
        logger.error(f"❌ {e.detail}")
        sys.exit(1)
