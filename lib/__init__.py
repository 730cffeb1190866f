# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for the comment store
# - email_transport.py: SMTP and development email transports
# - utils.py: Shared utilities (error base class, UUID helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.email_transport import (
    EmailTransport,
    EmailTransportError,
    LoggingEmailTransport,
    SmtpEmailTransport,
    UnconfiguredEmailTransport,
    build_email_transport,
)
from lib.utils import ApplicationError, is_uuid, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Email
    "EmailTransport",
    "EmailTransportError",
    "LoggingEmailTransport",
    "SmtpEmailTransport",
    "UnconfiguredEmailTransport",
    "build_email_transport",
    # Utils
    "ApplicationError",
    "is_uuid",
    "normalize_uuid",
]
