# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used by the store wrapper and the email transports.
# =============================================================================

from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        comment_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        comment_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def is_uuid(value: Any) -> bool:
    """Return True if value is a UUID or a string that parses as one."""
    if isinstance(value, UUID):
        return True
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base for errors raised by lib/ wrappers (store, email).

    Services catch these and raise the matching API exception, so nothing
    in lib/ knows about HTTP status codes.

    Example:
        class EmailTransportError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="EMAIL_TRANSPORT_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
