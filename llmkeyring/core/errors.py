"""
Structured error handling with stable error codes.

Registry and HTTP-layer failures are raised as AppError subclasses and
rendered as {error: {code, message, request_id?, details?}}. Provider
adapters never raise these; they fold every failure into a result value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API responses."""

    # General errors (1xxx)
    INTERNAL_ERROR = "E1000"
    VALIDATION_ERROR = "E1001"
    NOT_FOUND = "E1002"
    METHOD_NOT_ALLOWED = "E1003"

    # Credential errors (2xxx)
    SECRET_STORE_ERROR = "E2000"

    # Provider errors (4xxx)
    PROVIDER_UNAVAILABLE = "E4000"
    PROVIDER_ERROR = "E4001"
    INVALID_BASE_URL = "E4002"


@dataclass(frozen=True)
class ErrorResponse:
    """Structured error response for API.

    Format: {error: {code, message, request_id, details?}}
    """

    code: ErrorCode
    message: str
    request_id: str | None = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        error: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.request_id:
            error["request_id"] = self.request_id
        if self.details:
            error["details"] = self.details
        return {"error": error}


class AppError(Exception):
    """Base application error with structured error detail."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_response(self, request_id: str | None = None) -> ErrorResponse:
        """Create error response with request ID."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            request_id=request_id,
            details=self.details,
        )


class ValidationError(AppError):
    """Validation error (400)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(ErrorCode.VALIDATION_ERROR, message, 400, details)


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(ErrorCode.NOT_FOUND, message, 404)


class SecretStoreError(AppError):
    """Secret store read/write failure (500)."""

    def __init__(
        self, message: str = "Secret store error", details: dict[str, Any] | None = None
    ):
        super().__init__(ErrorCode.SECRET_STORE_ERROR, message, 500, details)


class InvalidBaseURLError(AppError):
    """Base URL cannot be parsed into an http(s) address (400)."""

    def __init__(self, message: str = "Invalid base URL", details: dict[str, Any] | None = None):
        super().__init__(ErrorCode.INVALID_BASE_URL, message, 400, details)


class ProviderError(AppError):
    """Provider answered with a non-2xx status (502)."""

    def __init__(
        self, message: str = "Provider error", details: dict[str, Any] | None = None
    ):
        super().__init__(ErrorCode.PROVIDER_ERROR, message, 502, details)


class ProviderUnavailableError(AppError):
    """Provider unreachable: DNS, connect, timeout (503)."""

    def __init__(
        self, message: str = "Provider unavailable", details: dict[str, Any] | None = None
    ):
        super().__init__(ErrorCode.PROVIDER_UNAVAILABLE, message, 503, details)
