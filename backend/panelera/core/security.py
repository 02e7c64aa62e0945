"""
Token helpers

Access tokens are issued by the external auth service and signed with the
shared SECRET_KEY. This module only verifies them (and can mint one for
trusted tooling such as scripts and tests).
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from panelera.core.settings import settings
from panelera.logging_config import get_logger

logger = get_logger(__name__)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token whose subject is the user id."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "type": "access", "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_user_from_token(token: str, expected_type: str = "access") -> Optional[int]:
    """
    Decode a token and return the user id it was issued for.

    Returns None when the token is malformed, expired, signed with another
    key or of the wrong type.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.PyJWTError as e:
        logger.info("Rejected invalid token", extra={"reason": str(e)})
        return None

    if payload.get("type") != expected_type:
        return None

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
