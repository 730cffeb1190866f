# =============================================================================
# app/routers/contact.py - Contact Form Endpoint
# =============================================================================
# Forwards contact-form submissions to the site owner's inbox.
# =============================================================================

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.dependencies import EmailTransportDep
from core.models.contact import ContactRequest, ContactResponse
from core.services.contact_service import ContactService

router = APIRouter()

# Sender used by the logging transport when no SMTP account is configured
FALLBACK_SENDER = "noreply@localhost"


@router.post("", response_model=ContactResponse)
async def submit_contact(request: ContactRequest, transport: EmailTransportDep):
    """
    Send a contact message.

    name, email and message are required (subject too when
    CONTACT_REQUIRE_SUBJECT is set). Replies go to the submitter's address.
    """
    sender = settings.EMAIL_USER or FALLBACK_SENDER
    return await run_in_threadpool(
        ContactService.submit,
        request,
        transport,
        sender,
        settings.contact_recipient or sender,
        settings.CONTACT_REQUIRE_SUBJECT,
    )
