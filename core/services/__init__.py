# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .comment_service import CommentService
from .contact_service import ContactService

__all__ = [
    "CommentService",
    "ContactService",
]
