# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - comments.py: List, create and like comments
# - contact.py: Contact form
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import comments
from . import contact

__all__ = [
    "health",
    "comments",
    "contact",
]
