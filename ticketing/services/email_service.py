"""Outbound email transport for ticket delivery.

The core hands a fully rendered OutboundEmail to a transport and only
learns success or failure; retries belong to the caller.
"""
import logging
import smtplib
from abc import ABC, abstractmethod
from email.errors import MessageError
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from pydantic import BaseModel

from ticketing.config import settings

logger = logging.getLogger(__name__)


class EmailAttachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "image/png"
    content_id: Optional[str] = None  # referenced as cid:<content_id> from the HTML body


class OutboundEmail(BaseModel):
    recipient: str
    subject: str
    html_body: str
    text_body: str
    attachment: Optional[EmailAttachment] = None


class EmailDeliveryError(Exception):
    """The transport could not hand the message to the mail server."""


class EmailTransport(ABC):
    @abstractmethod
    def send(self, message: OutboundEmail) -> None:
        """Hand ``message`` to the mail system or raise EmailDeliveryError."""


class SMTPTransport(EmailTransport):
    """Deliver over SMTP with STARTTLS. Every socket operation is bounded by ``timeout``."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        sender_name: str,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.sender_name = sender_name
        self.use_tls = use_tls
        self.timeout = timeout

    def build_mime(self, message: OutboundEmail) -> MIMEMultipart:
        msg = MIMEMultipart("related")
        msg["Subject"] = message.subject
        msg["From"] = formataddr((self.sender_name, self.sender))
        msg["To"] = message.recipient

        alternative = MIMEMultipart("alternative")
        alternative.attach(MIMEText(message.text_body, "plain"))
        alternative.attach(MIMEText(message.html_body, "html"))
        msg.attach(alternative)

        if message.attachment:
            _, subtype = message.attachment.content_type.split("/", 1)
            image = MIMEImage(message.attachment.content, _subtype=subtype)
            image.add_header("Content-Disposition", "inline", filename=message.attachment.filename)
            if message.attachment.content_id:
                image.add_header("Content-ID", f"<{message.attachment.content_id}>")
            msg.attach(image)

        return msg

    def send(self, message: OutboundEmail) -> None:
        try:
            mime = self.build_mime(message)
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(mime)
        except (smtplib.SMTPException, OSError, MessageError) as exc:
            raise EmailDeliveryError(f"SMTP delivery to {message.recipient} failed: {exc}") from exc
        logger.info("Email '%s' sent to %s", message.subject, message.recipient)


def get_email_transport() -> EmailTransport:
    """FastAPI dependency — the configured SMTP transport."""
    return SMTPTransport(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        sender=settings.SENDER_EMAIL,
        sender_name=settings.APP_NAME,
        use_tls=settings.SMTP_USE_TLS,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )
