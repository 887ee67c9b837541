"""
Custom exceptions for the venue discovery backend.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Query errors
    INVALID_COORDINATES = "INVALID_COORDINATES"
    INVALID_QUERY = "INVALID_QUERY"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"

    # Admin access errors
    MISSING_ADMIN_TOKEN = "MISSING_ADMIN_TOKEN"
    INVALID_ADMIN_TOKEN = "INVALID_ADMIN_TOKEN"
    MISSING_USER = "MISSING_USER"

    # Dependency errors
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PROCESSING_TIMEOUT = "PROCESSING_TIMEOUT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class VenueServiceException(Exception):
    """Base exception for the venue discovery backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class InvalidQueryError(VenueServiceException):
    """Raised when query parameters are missing, non-finite or out of range."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.INVALID_QUERY,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=400
        )


class NotFoundError(VenueServiceException):
    """Raised when a venue does not exist or is not visible to the caller."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} '{resource_id}' not found",
            error_code=ErrorCode.NOT_FOUND,
            details={"resource": resource, "id": resource_id},
            status_code=404
        )


class AdminAuthError(VenueServiceException):
    """Raised when an admin endpoint is called without a valid token."""

    def __init__(self, missing: bool):
        super().__init__(
            message="Admin token required" if missing else "Invalid admin token",
            error_code=ErrorCode.MISSING_ADMIN_TOKEN if missing else ErrorCode.INVALID_ADMIN_TOKEN,
            status_code=401 if missing else 403
        )


class StorageUnavailableError(VenueServiceException):
    """Raised when the venue store cannot serve a request."""

    def __init__(self, operation: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Venue storage unavailable during '{operation}'",
            error_code=ErrorCode.STORAGE_UNAVAILABLE,
            details=details or {"operation": operation},
            status_code=503
        )


class ProviderError(VenueServiceException):
    """Raised when an external places provider rejects a request."""

    def __init__(self, provider: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{provider}: {message}",
            error_code=ErrorCode.PROVIDER_ERROR,
            details=details or {"provider": provider},
            status_code=502
        )
