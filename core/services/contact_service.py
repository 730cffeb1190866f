# =============================================================================
# core/services/contact_service.py - Contact Form Logic
# =============================================================================
# Validates a contact submission, composes the email and hands it to the
# configured EmailTransport. Nothing is stored.
# =============================================================================

import logging
import re
from email.message import EmailMessage

from lib.email_transport import EmailTransport, EmailTransportError
from core.models.contact import ContactRequest, ContactResponse
from app.exceptions import (
    EmailDeliveryError,
    InvalidEmailError,
    InvalidHeaderFieldError,
    MissingFieldsError,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

DEFAULT_SUBJECT = "New Contact Message"

# Copied into From / Reply-To / Subject, so they must stay on one line
HEADER_FIELDS = ("name", "email", "subject")


def is_valid_email(value: str) -> bool:
    """Basic shape check: something@something.tld with no whitespace."""
    return bool(EMAIL_PATTERN.match(value))


class ContactService:
    """Service for contact-form submissions."""

    @staticmethod
    def validate(request: ContactRequest, require_subject: bool = False) -> None:
        """
        Raises:
            MissingFieldsError: If a required field is missing or blank
            InvalidHeaderFieldError: If a header field contains a line break
            InvalidEmailError: If the address is malformed
        """
        required = ["name", "email"]
        if require_subject:
            required.append("subject")
        required.append("message")

        missing = [
            field for field in required
            if not (getattr(request, field) or "").strip()
        ]
        if missing:
            raise MissingFieldsError(missing)

        for field in HEADER_FIELDS:
            value = (getattr(request, field) or "").strip()
            if "\r" in value or "\n" in value:
                raise InvalidHeaderFieldError(field)

        if not is_valid_email(request.email.strip()):
            raise InvalidEmailError(request.email)

    @staticmethod
    def compose(request: ContactRequest, sender: str, recipient: str) -> EmailMessage:
        """
        Build the outgoing message.

        The sender account sends on behalf of the submitter; replies go
        straight to the submitter through Reply-To.
        """
        name = request.name.strip()
        email = request.email.strip()
        subject = (request.subject or "").strip()

        message = EmailMessage()
        message["From"] = f'"{name}" <{sender}>'
        message["Reply-To"] = email
        message["To"] = recipient
        message["Subject"] = f"Contact: {subject}" if subject else DEFAULT_SUBJECT
        message.set_content(f"Name: {name}\nEmail: {email}\nMessage:\n{request.message}")
        return message

    @staticmethod
    def submit(
        request: ContactRequest,
        transport: EmailTransport,
        sender: str,
        recipient: str,
        require_subject: bool = False,
    ) -> ContactResponse:
        """
        Validate and deliver a contact submission.

        Args:
            request: Submitted fields
            transport: Where the email goes
            sender: Address of the sending account
            recipient: Inbox receiving contact messages
            require_subject: Treat subject as a required field

        Returns:
            Acknowledgement

        Raises:
            MissingFieldsError: If a required field is missing
            InvalidEmailError: If the address is malformed (transport untouched)
            EmailDeliveryError: If the transport fails
        """
        ContactService.validate(request, require_subject=require_subject)
        message = ContactService.compose(request, sender=sender, recipient=recipient)

        try:
            transport.send(message)
        except EmailTransportError as e:
            logger.error(f"Email error: {e}")
            raise EmailDeliveryError(e.message)
        except Exception as e:
            logger.exception(f"Unexpected email transport failure: {e}")
            raise EmailDeliveryError(str(e))

        logger.info(f"Contact message from {request.email.strip()} delivered")
        return ContactResponse()
