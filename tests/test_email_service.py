"""Tests for the SMTP transport.

Covers:
- MIME layout: alternative text/html plus an inline CID image
- Server, TLS and header failures all surface as EmailDeliveryError
- The transport interface cannot be instantiated
"""
import smtplib

import pytest

from ticketing.services import email_service
from ticketing.services.email_service import (
    EmailAttachment,
    EmailDeliveryError,
    EmailTransport,
    OutboundEmail,
    SMTPTransport,
)


class FakeSMTP:
    """Stands in for smtplib.SMTP; serializes the message like a real send."""

    sent = []
    refuse = False

    def __init__(self, host, port, timeout=None):
        self.timeout = timeout

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def send_message(self, msg):
        if FakeSMTP.refuse:
            raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})
        FakeSMTP.sent.append(msg.as_string())


@pytest.fixture
def smtp(monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.refuse = False
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _transport():
    return SMTPTransport(
        host="mail.test", port=587, username="bot", password="secret",
        sender="tickets@example.com", sender_name="Event Ticketing", timeout=5.0,
    )


def _message(subject="Your Ticket for Launch Night"):
    return OutboundEmail(
        recipient="ana@example.com",
        subject=subject,
        html_body='<p>Hi</p><img src="cid:qrcode">',
        text_body="Hi",
        attachment=EmailAttachment(filename="event-ticket-qr.png", content=b"\x89PNG fake", content_id="qrcode"),
    )


def test_build_mime_layout():
    mime = _transport().build_mime(_message())
    assert mime.get_content_subtype() == "related"
    alternative, image = mime.get_payload()
    assert [part.get_content_type() for part in alternative.get_payload()] == ["text/plain", "text/html"]
    assert image["Content-ID"] == "<qrcode>"
    assert image.get_content_type() == "image/png"


def test_send_delivers(smtp):
    _transport().send(_message())
    assert len(smtp.sent) == 1
    assert "Subject: Your Ticket for Launch Night" in smtp.sent[0]


def test_refused_recipient_is_delivery_error(smtp):
    smtp.refuse = True
    with pytest.raises(EmailDeliveryError):
        _transport().send(_message())


def test_header_injection_is_delivery_error(smtp):
    with pytest.raises(EmailDeliveryError):
        _transport().send(_message(subject="Hi\nBcc: x@y.z"))
    assert smtp.sent == []


def test_transport_interface_is_abstract():
    with pytest.raises(TypeError):
        EmailTransport()
