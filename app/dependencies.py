# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and replaced in
# tests through app.dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from lib.email_transport import EmailTransport, build_email_transport


@lru_cache
def get_email_transport() -> EmailTransport:
    """
    Get the outbound email transport.

    Built once from settings: SMTP when credentials exist, a logging
    transport in development otherwise. Never raises, so request
    validation always runs before anything touches the transport.
    """
    return build_email_transport(settings)


# Type alias for dependency injection
EmailTransportDep = Annotated[EmailTransport, Depends(get_email_transport)]
