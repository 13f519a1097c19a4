"""
Custom exceptions for the ticketing seat booking client.
"""

from typing import Any, Dict, Optional, List
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the client."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Seat map errors
    INVALID_ROW_LABEL = "INVALID_ROW_LABEL"
    INVALID_ALPHABET = "INVALID_ALPHABET"
    INVALID_SEAT_CODE = "INVALID_SEAT_CODE"
    SEAT_MAP_UNAVAILABLE = "SEAT_MAP_UNAVAILABLE"

    # Business logic errors
    SEAT_NOT_AVAILABLE = "SEAT_NOT_AVAILABLE"
    SEAT_ALREADY_BOOKED = "SEAT_ALREADY_BOOKED"
    SELECTION_LIMIT_EXCEEDED = "SELECTION_LIMIT_EXCEEDED"
    INVALID_BOOKING_REQUEST = "INVALID_BOOKING_REQUEST"

    # Concurrency errors
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"

    # External service errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    CACHE_SERVICE_ERROR = "CACHE_SERVICE_ERROR"


class TicketingError(Exception):
    """Base exception class for the ticketing client."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        retry_after: Optional[int] = None
    ):
        """Initialize the exception with comprehensive error information."""
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []
        self.retry_after = retry_after
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for display or API responses."""
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if self.suggestions:
            result["suggestions"] = self.suggestions

        if self.retry_after:
            result["retry_after"] = self.retry_after

        return result


class ValidationError(TicketingError):
    """Exception raised for validation errors."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, List[str]]] = None, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.VALIDATION_ERROR)
        if field_errors and "details" not in kwargs:
            kwargs["details"] = {"field_errors": field_errors}
        super().__init__(message, **kwargs)
        self.field_errors = field_errors or {}


class InvalidAlphabetError(ValidationError):
    """Exception raised when a row-label alphabet cannot be used."""

    def __init__(self, alphabet: str, reason: str, **kwargs):
        super().__init__(
            f"Invalid row label alphabet {alphabet!r}: {reason}",
            error_code=ErrorCode.INVALID_ALPHABET,
            details={"alphabet": alphabet, "reason": reason},
            **kwargs
        )


class InvalidRowLabelError(ValidationError):
    """Exception raised when a row label uses characters outside the alphabet."""

    def __init__(self, label: str, reason: str, **kwargs):
        super().__init__(
            f"Invalid row label {label!r}: {reason}",
            error_code=ErrorCode.INVALID_ROW_LABEL,
            details={"label": label, "reason": reason},
            **kwargs
        )


class InvalidSeatCodeError(ValidationError):
    """Exception raised when a seat code cannot be built or parsed."""

    def __init__(self, code: str, reason: str, **kwargs):
        super().__init__(
            f"Invalid seat code {code!r}: {reason}",
            error_code=ErrorCode.INVALID_SEAT_CODE,
            details={"code": code, "reason": reason},
            **kwargs
        )


class BookingPayloadError(ValidationError):
    """Exception raised when a booking request cannot be assembled."""

    def __init__(self, message: str, seat_codes: Optional[List[str]] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.INVALID_BOOKING_REQUEST,
            details={"seat_codes": seat_codes} if seat_codes else None,
            suggestions=["Reload the seat map", "Select your seats again"],
            **kwargs
        )


class NotFoundError(TicketingError):
    """Base exception for resource not found errors."""

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_id: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id} if resource_type else None,
            **kwargs
        )


class AuthenticationError(TicketingError):
    """Exception raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.UNAUTHORIZED,
            suggestions=["Login again"],
            **kwargs
        )


class BusinessLogicError(TicketingError):
    """Base exception for business logic violations."""
    pass


class SeatNotAvailableError(BusinessLogicError):
    """Exception raised when a seat is not available for booking."""

    def __init__(self, seat_code: str, current_status: str, **kwargs):
        super().__init__(
            f"Seat {seat_code} is not available (status: {current_status})",
            error_code=ErrorCode.SEAT_NOT_AVAILABLE,
            details={"seat_code": seat_code, "current_status": current_status},
            suggestions=["Choose a different seat", "Refresh seat availability"],
            **kwargs
        )


class SelectionLimitError(BusinessLogicError):
    """Exception raised when more seats are requested than one booking allows."""

    def __init__(self, limit: int, **kwargs):
        super().__init__(
            f"At most {limit} seats can be selected per booking",
            error_code=ErrorCode.SELECTION_LIMIT_EXCEEDED,
            details={"limit": limit},
            suggestions=["Deselect a seat before choosing another one"],
            **kwargs
        )


class ConcurrencyError(TicketingError):
    """Exception raised for concurrency-related issues."""

    def __init__(self, message: str, retry_after: int = 1, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.CONCURRENCY_CONFLICT)
        kwargs.setdefault("suggestions", ["Please try again", "Wait a moment and retry"])
        super().__init__(
            message,
            retry_after=retry_after,
            **kwargs
        )


class SeatAlreadyBookedError(ConcurrencyError):
    """Exception raised when the backend reports a seat taken by someone else."""

    def __init__(self, message: str = "One or more seats were booked by another user", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.SEAT_ALREADY_BOOKED,
            suggestions=["Refresh seat availability", "Choose different seats"],
            **kwargs
        )


class ExternalServiceError(TicketingError):
    """Exception raised for external service failures."""

    def __init__(self, service_name: str, message: str, status_code: Optional[int] = None, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.EXTERNAL_SERVICE_ERROR)
        kwargs.setdefault("suggestions", ["Try again later", "Contact support if problem persists"])
        details = {"service_name": service_name, "status_code": status_code}
        details.update(kwargs.pop("details", None) or {})
        super().__init__(
            f"{service_name} service error: {message}",
            details=details,
            **kwargs
        )
        self.status_code = status_code


class ApiRequestError(ExternalServiceError):
    """Exception raised when a backend API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__("ticketing-api", message, status_code=status_code, **kwargs)


class SeatMapUnavailableError(ExternalServiceError):
    """Exception raised when a venue seat map cannot be fetched or parsed."""

    def __init__(self, venue_id: Optional[int], message: str, **kwargs):
        super().__init__(
            "seat-map",
            message,
            error_code=ErrorCode.SEAT_MAP_UNAVAILABLE,
            details={"venue_id": venue_id},
            **kwargs
        )


class CacheServiceError(ExternalServiceError):
    """Exception raised for session store failures."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            "cache",
            message,
            error_code=ErrorCode.CACHE_SERVICE_ERROR,
            **kwargs
        )
