"""
Error taxonomy for the booking engine.

Services raise these; the HTTP layer decides how each one is rendered for
its caller (integration envelope or dashboard HTTPException).
"""
from typing import Any, Dict, List, Optional


class BookingError(Exception):
    """Base exception for all booking-engine errors."""

    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None,
                 errors: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        if status_code:
            self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary representation."""
        error_dict = {
            "error": self.message,
            "code": self.__class__.__name__,
        }
        if self.errors:
            error_dict["errors"] = self.errors
        return error_dict


class AuthError(BookingError):
    """Missing or invalid API key / token. Raised before any tenant data is read."""

    status_code = 401
    default_message = "Invalid or missing API key"


class InactiveAccountError(AuthError):
    status_code = 403
    default_message = "Customer account inactive"


class ValidationError(BookingError):
    """Missing or malformed request fields. Raised before any store access."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(BookingError):
    status_code = 404
    default_message = "The requested resource was not found."


class ConflictError(BookingError):
    """The requested interval overlaps a live reservation or a staff block."""

    status_code = 409
    default_message = "The requested time slot is not available"

    def __init__(self, message: Optional[str] = None, alternatives: Optional[List[str]] = None,
                 errors: Optional[Dict[str, Any]] = None):
        super().__init__(message, errors=errors)
        self.alternatives = alternatives or []

    def to_dict(self) -> Dict[str, Any]:
        error_dict = super().to_dict()
        error_dict["alternatives"] = self.alternatives
        return error_dict


class InvalidTransitionError(BookingError):
    status_code = 409
    default_message = "Invalid status transition"


class StoreError(BookingError):
    """
    The persistent store failed. For a booking write this means the outcome is
    unknown: callers must re-query before retrying.
    """

    status_code = 500
    default_message = "Internal server error"
