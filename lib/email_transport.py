# =============================================================================
# lib/email_transport.py - Outbound Email Transports
# =============================================================================
# The contact form hands a composed EmailMessage to an EmailTransport.
# Implementations:
# - SmtpEmailTransport: Real delivery over SMTP (SSL or STARTTLS)
# - LoggingEmailTransport: Development fallback that only logs
# - UnconfiguredEmailTransport: Production without credentials, always fails
#
# Transports are synchronous; callers in async code run send() in a
# thread pool.
#
# Usage:
#   from lib.email_transport import build_email_transport
#   transport = build_email_transport(settings)
#   transport.send(message)
# =============================================================================

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

from app.config import Settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class EmailTransportError(ApplicationError):
    """Raised when a transport fails to hand off a message."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="EMAIL_TRANSPORT_ERROR", **kwargs)


class EmailTransport(Protocol):
    """Anything that can send one email message."""

    def send(self, message: EmailMessage) -> None:
        """Send `message` or raise EmailTransportError."""
        ...


class SmtpEmailTransport:
    """
    SMTP delivery with login.

    Defaults target Gmail (smtp.gmail.com:465 over SSL), which needs an
    app password in EMAIL_PASS.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_ssl: bool = True,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout) as server:
                    server.login(self.username, self.password)
                    server.send_message(message)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls(context=context)
                    server.login(self.username, self.password)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailTransportError(
                f"SMTP delivery failed: {e}",
                suggestion="Check EMAIL_USER/EMAIL_PASS and the SMTP host settings",
                details={"host": self.host, "port": self.port},
            )

        logger.info(f"Email sent via {self.host}: {message['Subject']}")


class UnconfiguredEmailTransport:
    """
    Production stand-in when SMTP credentials are missing.

    Every send fails, so submissions are still validated first and the
    failure surfaces as a delivery error.
    """

    def send(self, message: EmailMessage) -> None:
        raise EmailTransportError(
            "SMTP credentials are not configured",
            suggestion="Set EMAIL_USER and EMAIL_PASS",
        )


class LoggingEmailTransport:
    """Development transport: logs the message instead of sending it."""

    def __init__(self):
        self.sent: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> None:
        self.sent.append(message)
        logger.info(
            f"[DEV] Email not sent (SMTP not configured) -> "
            f"subject: {message['Subject']}, to: {message['To']}"
        )


def build_email_transport(config: Settings) -> EmailTransport:
    """
    Pick the transport for the current configuration.

    SMTP when credentials are set. Without them: the logging transport
    in development and staging, and a transport that refuses to send in
    production.
    """
    if config.smtp_configured:
        return SmtpEmailTransport(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.EMAIL_USER,
            password=config.EMAIL_PASS,
            use_ssl=config.SMTP_USE_SSL,
        )

    if config.is_production:
        logger.warning("EMAIL_USER/EMAIL_PASS not set: contact messages will fail to send")
        return UnconfiguredEmailTransport()

    return LoggingEmailTransport()
