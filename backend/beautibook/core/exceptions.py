# backend/beautibook/core/exceptions.py
"""
Domain exceptions for the booking core.

Services raise these typed failures; the HTTP boundary converts them with
``to_http_exception()``. Nothing in the service layer builds HTTP responses.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific exceptions."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when input is malformed or violates a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class NotFoundException(DomainException):
    """Raised when a referenced entity is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class SlotUnavailableException(ConflictException):
    """Raised when a slot is already booked or held by another session."""

    default_code = "SLOT_UNAVAILABLE"

    def __init__(
        self,
        message: str = "Slot not available",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class GoneException(DomainException):
    """Raised when a resource existed but is no longer usable."""

    status_code = status.HTTP_410_GONE
    default_code = "GONE"


class HoldGoneException(GoneException):
    """Raised when a hold is missing or expired at conversion time."""

    default_code = "HOLD_EXPIRED"


class ServiceException(DomainException):
    """Raised for unexpected failures inside the service layer."""

    default_code = "SERVICE_ERROR"


class RepositoryException(Exception):
    """Raised when a data access operation fails."""
