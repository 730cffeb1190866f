# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Status mapping:
#   400 - missing fields, bad content type, malformed email
#   404 - unknown comment
#   500 - storage or email delivery failures
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CineThreadException(Exception):
    """
    Base exception for the CineThread API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CINETHREAD_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation Exceptions
# =============================================================================

class MissingFieldsError(CineThreadException):
    """Raised when required fields are absent or empty."""

    def __init__(self, fields: list[str]):
        super().__init__(
            message="Missing required fields",
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion=f"Provide non-empty values for: {', '.join(fields)}",
            details={"missing_fields": fields}
        )


class InvalidContentTypeError(CineThreadException):
    """Raised when contentType is not one of the supported values."""

    def __init__(self, value: Any, allowed: list[str]):
        super().__init__(
            message=f"Invalid content type: {value}",
            code="INVALID_ENUM",
            status_code=400,
            suggestion=f"contentType must be one of: {', '.join(allowed)}",
            details={"content_type": value, "allowed": allowed}
        )


class InvalidEmailError(CineThreadException):
    """Raised when a contact submission carries a malformed address."""

    def __init__(self, email: str):
        super().__init__(
            message="Invalid email format",
            code="INVALID_FORMAT",
            status_code=400,
            suggestion="Use an address like name@example.com",
            details={"email": email}
        )


class InvalidHeaderFieldError(CineThreadException):
    """Raised when a field copied into an email header spans several lines."""

    def __init__(self, field: str):
        super().__init__(
            message=f"Field '{field}' must be a single line",
            code="INVALID_FORMAT",
            status_code=400,
            suggestion=f"Remove line breaks from {field}",
            details={"field": field}
        )


# =============================================================================
# Comment Exceptions
# =============================================================================

class CommentNotFoundError(CineThreadException):
    """Raised when a comment ID doesn't exist."""

    def __init__(self, comment_id: str):
        super().__init__(
            message=f"Comment not found: {comment_id}",
            code="COMMENT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the comment id is correct",
            details={"comment_id": comment_id}
        )


class StorageError(CineThreadException):
    """Raised when the comment store cannot be read or written."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Error {operation}",
            code="STORAGE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "error": error}
        )


# =============================================================================
# Contact Exceptions
# =============================================================================

class EmailDeliveryError(CineThreadException):
    """Raised when the outbound email transport fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to send email",
            code="DELIVERY_ERROR",
            status_code=500,
            suggestion="Try again later or reach out through another channel",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def cinethread_exception_handler(
    request: Request,
    exc: CineThreadException
) -> JSONResponse:
    """
    Convert CineThreadException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request body validation errors (malformed JSON, wrong types).

    Reported as 400 so that every bad-input case shares one status.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
