"""
Panelera - Custom Exception Hierarchy

Provides structured, typed exceptions with error codes for consistent
error handling across the application.

Usage:
    from panelera.exceptions import PermissionDeniedError, UpstreamReadError

    # In a dependency
    raise PermissionDeniedError("Admin access required", resource="analytics")

    # When an aggregation read fails
    raise UpstreamReadError(["production_monthly"], reason="connection refused")
"""
from typing import Any, Dict, List, Optional


class PanelaException(Exception):
    """
    Base exception for all Panelera errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., "PERMISSION_DENIED")
        status_code: HTTP status code to return
        details: Additional context for debugging
    """

    error_code: str = "PANELERA_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# ===================
# 400 Bad Request Errors
# ===================


class InvalidParameterError(PanelaException):
    """Raised when a request parameter is outside its supported domain."""

    error_code = "INVALID_PARAMETER"
    status_code = 400

    def __init__(
        self,
        message: str = "Invalid parameter",
        *,
        parameter: Optional[str] = None,
        value: Any = None,
        allowed: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["value"] = str(value)
        if allowed:
            details["allowed"] = allowed
        super().__init__(message, details=details)


# ===================
# 401 Unauthorized Errors
# ===================


class AuthenticationError(PanelaException):
    """Raised when there is no authenticated caller."""

    error_code = "AUTHENTICATION_ERROR"
    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)


class InvalidTokenError(AuthenticationError):
    """Raised when token is invalid, expired or points at an unknown user."""

    error_code = "INVALID_TOKEN"

    def __init__(
        self,
        message: str = "Could not validate credentials",
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)


# ===================
# 403 Forbidden Errors
# ===================


class PermissionDeniedError(PanelaException):
    """Raised when user lacks permission for an action."""

    error_code = "PERMISSION_DENIED"
    status_code = 403

    def __init__(
        self,
        message: str = "Permission denied",
        *,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if action:
            details["action"] = action
        if resource:
            details["resource"] = resource
        super().__init__(message, details=details)


# ===================
# 500 Internal Server Errors
# ===================


class UpstreamReadError(PanelaException):
    """
    Raised when one or more analytics reads fail or time out.

    A failed read is never reported as zero: the whole report fails and the
    affected metric families are listed in ``details["families"]``.
    """

    error_code = "ANALYTICS_READ_ERROR"
    status_code = 500

    def __init__(
        self,
        families: List[str],
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        details["families"] = list(families)
        if reason:
            details["reason"] = reason
        message = "Analytics data could not be read"
        if families:
            message = f"Analytics data could not be read for: {', '.join(families)}"
        super().__init__(message, details=details)
