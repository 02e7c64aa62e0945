"""
API Dependencies

Authentication and data-access dependencies shared by the endpoints.
Authorization is resolved here, before any endpoint does aggregation work.
"""
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from panelera.core.security import get_user_from_token
from panelera.core.settings import settings
from panelera.core.status_config import STAFF_ROLES
from panelera.db.session import SessionLocal, get_db
from panelera.exceptions import AuthenticationError, InvalidTokenError, PermissionDeniedError
from panelera.models.user import User
from panelera.services.analytics_store import AnalyticsStore

# Tokens are issued by the external auth service; we only read them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user from access token

    Args:
        token: JWT access token from Authorization header
        db: Database session

    Returns:
        User object if token is valid

    Raises:
        AuthenticationError if no token was sent
        InvalidTokenError if token is invalid or user not found
        PermissionDeniedError if the account is inactive
    """
    if not token:
        raise AuthenticationError()

    user_id = get_user_from_token(token, expected_type="access")
    if user_id is None:
        raise InvalidTokenError()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise InvalidTokenError()

    if not user.is_active:
        raise PermissionDeniedError("User account is inactive")

    return user


async def get_current_staff_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """
    Dependency to require staff access (admin or operator).

    Raises:
        PermissionDeniedError if the user has no staff role
    """
    if current_user.role not in STAFF_ROLES:
        raise PermissionDeniedError("Staff access required")
    return current_user


async def get_current_admin_user(
    current_user: Annotated[User, Depends(get_current_staff_user)]
) -> User:
    """
    Dependency to require admin access.

    Raises:
        PermissionDeniedError if user is not an admin
    """
    if not current_user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return current_user


async def get_analytics_user(
    current_user: Annotated[User, Depends(get_current_staff_user)]
) -> User:
    """
    Dependency for analytics reports.

    Any staff member may read reports unless ANALYTICS_ADMIN_ONLY is set.
    """
    if settings.ANALYTICS_ADMIN_ONLY:
        return await get_current_admin_user(current_user)
    return current_user


def get_analytics_store() -> AnalyticsStore:
    """One store per request; each read inside it opens its own session."""
    return AnalyticsStore(SessionLocal)
