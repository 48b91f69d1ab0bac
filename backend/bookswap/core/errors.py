"""
Service error taxonomy.

Services raise these; the exception handlers in ``bookswap.main`` turn them
into ``{"ok": false, "error": ..., "details": ...}`` responses with the
matching HTTP status code.
"""
import math
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors reported by the service layer."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or ineligible input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(ServiceError):
    """Missing or invalid credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    """Authenticated, but not allowed to act on this resource."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class LockedError(ServiceError):
    """Account temporarily locked after too many failed logins."""
    status_code = status.HTTP_423_LOCKED
    default_message = "Account locked due to too many failed attempts."

    def __init__(self, lock_until: datetime, now: Optional[datetime] = None):
        now = now or datetime.utcnow()
        remaining = max(0.0, (lock_until - now).total_seconds())
        self.minutes_left = math.ceil(remaining / 60)
        super().__init__(details={"locked": True, "minutes_left": self.minutes_left})


class UnexpectedError(ServiceError):
    """Storage or infrastructure failure."""
