# =============================================================================
# core/models/contact.py - Contact Form Schemas
# =============================================================================
# - ContactRequest: Body of POST /contact (fields checked by ContactService)
# - ContactResponse: Acknowledgement returned after the email is sent
# =============================================================================

from pydantic import BaseModel, Field


class ContactRequest(BaseModel):
    """
    Schema for a contact-form submission.

    Fields are optional at the schema level so that missing values are
    reported as a 400 by ContactService.

    Example:
        {
            "name": "Ana",
            "email": "ana@example.com",
            "subject": "Broken poster",
            "message": "The poster for title 603 does not load."
        }
    """

    name: str | None = Field(default=None, description="Sender name")
    email: str | None = Field(default=None, description="Sender address (used as Reply-To)")
    subject: str | None = Field(default=None, description="Optional subject line")
    message: str | None = Field(default=None, description="Message body")


class ContactResponse(BaseModel):
    """Acknowledgement of a delivered contact message."""
    message: str = Field(default="Message sent successfully")
