"""
API dependencies for dependency injection
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from domain.models import AppUser, get_db_session
from repositories import UserRepository
from app.exceptions import ForbiddenError, UnauthorizedError


def _parse_user_id(raw: str) -> UUID:
    try:
        return UUID(raw.strip())
    except (ValueError, AttributeError):
        raise UnauthorizedError("Invalid X-User-Id header", code="INVALID_USER_ID")


def get_optional_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db_session),
) -> Optional[AppUser]:
    """Caller identity if the X-User-Id header is present, else None."""
    if not x_user_id:
        return None
    user = UserRepository(db).get_by_id(_parse_user_id(x_user_id))
    if not user:
        raise UnauthorizedError("Unknown user", code="UNKNOWN_USER")
    return user


def get_current_user(user: Optional[AppUser] = Depends(get_optional_user)) -> AppUser:
    """
    Authenticated caller resolved from the X-User-Id header.

    Session handling lives in the gateway in front of the API; it forwards the
    verified user id in this header.
    """
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user


def require_admin(user: AppUser = Depends(get_current_user)) -> AppUser:
    if not user.is_admin:
        raise ForbiddenError("Admin role required", code="ADMIN_REQUIRED")
    return user
