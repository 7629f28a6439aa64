"""Ticket issuer — derives the check-in credential for a response and mails it.

The credential is a bearer token: ``participantId`` (the response id) is
what check-in looks up; ``checkInCode`` only tags the issuance. The code
is generated once per response and reused on every re-send, so a ticket
that was already delivered stays valid.
"""
import html
import logging
from datetime import datetime, timezone
from email.errors import MessageError
from typing import Any, Optional

import pytz
from qrcode.exceptions import DataOverflowError
from sqlalchemy.orm import Session

from ticketing.config import settings
from ticketing.exceptions import IssueError
from ticketing.models.event import Event
from ticketing.models.form import Form
from ticketing.models.form_response import FormResponse
from ticketing.services.email_service import (
    EmailAttachment,
    EmailDeliveryError,
    EmailTransport,
    OutboundEmail,
)
from ticketing.services.qr import encode_qr_png

logger = logging.getLogger(__name__)

QR_CONTENT_ID = "qrcode"
QR_FILENAME = "event-ticket-qr.png"


def make_check_in_code(participant_id: str, issued_at: datetime) -> str:
    """Participant id plus the issuance instant in epoch milliseconds."""
    return f"{participant_id}-{int(issued_at.timestamp() * 1000)}"


def _local_start(event: Event) -> datetime:
    start = event.start_time_utc
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start.astimezone(pytz.timezone(event.timezone or "UTC"))


def format_event_date(event: Event) -> str:
    return _local_start(event).strftime("%A, %B %d, %Y")


def format_event_time(event: Event) -> str:
    local = _local_start(event)
    return f"{local.strftime('%I:%M %p')} {local.tzname()}"


def build_credential(response: FormResponse, event: Event, check_in_code: str) -> dict[str, Any]:
    """The QR payload presented at the gate."""
    return {
        "participantId": response.response_id,
        "name": response.participant_name,
        "email": response.participant_email,
        "event": event.title,
        "date": format_event_date(event),
        "time": format_event_time(event),
        "checkInCode": check_in_code,
        "formId": response.form_id,
        "eventId": response.event_id,
    }


def _render_html(response: FormResponse, event: Event, form: Form, include_qr: bool) -> str:
    esc = html.escape
    message = "<br>".join(esc(line) for line in (form.ticket_message or "").split("\n"))
    qr_block = ""
    if include_qr:
        qr_block = f"""
            <div style="text-align: center; margin: 30px 0;">
              <p style="color: #333; font-weight: bold; margin-bottom: 10px;">Your Check-in QR Code</p>
              <img src="cid:{QR_CONTENT_ID}" alt="QR Code" style="max-width: 250px; border: 1px solid #ddd; padding: 10px;">
              <p style="color: #666; font-size: 12px; margin-top: 10px;">Present this QR code at the event entrance for check-in</p>
            </div>"""

    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <div style="background-color: #1a1a1a; padding: 20px; text-align: center;">
            <h1 style="color: white; margin: 0;">{esc(settings.APP_NAME)}</h1>
            <p style="color: white; margin: 5px 0;">Your Event Ticket</p>
          </div>
          <div style="padding: 20px;">
            <div style="background-color: #f8f9fa; padding: 20px; margin: 20px 0;">
              <h3 style="color: #333; margin: 0 0 10px 0;">{esc(event.title)}</h3>
              <p><strong>Date:</strong> {esc(format_event_date(event))}</p>
              <p><strong>Time:</strong> {esc(format_event_time(event))}</p>
              <p><strong>Location:</strong> {esc(event.location or "")}</p>
              <p><strong>Participant:</strong> {esc(response.participant_name)}</p>
              <p><strong>Ticket ID:</strong> {esc(response.response_id)}</p>
            </div>
            <div style="margin: 20px 0;">{message}</div>{qr_block}
            <p style="color: #999; font-size: 12px; text-align: center;">The {esc(settings.APP_NAME)} Team</p>
          </div>
        </div>
    """


def _render_text(response: FormResponse, event: Event, form: Form, include_qr: bool) -> str:
    lines = [
        f"Hi {response.participant_name},",
        "",
        form.ticket_message or "",
        "",
        "Event Details:",
        f"Event: {event.title}",
        f"Date: {format_event_date(event)}",
        f"Time: {format_event_time(event)}",
        f"Location: {event.location or ''}",
        f"Ticket ID: {response.response_id}",
        "",
    ]
    if include_qr:
        lines += ["Your QR code is attached for check-in at the venue.", ""]
    lines += [
        "Please keep this email as your confirmation.",
        "",
        "Best regards,",
        f"The {settings.APP_NAME} Team",
    ]
    return "\n".join(lines)


def render_ticket_email(
    response: FormResponse,
    event: Event,
    form: Form,
    credential: dict[str, Any],
) -> OutboundEmail:
    """Build the ticket message; the QR image encodes the JSON credential."""
    attachment = None
    if form.include_qr:
        attachment = EmailAttachment(
            filename=QR_FILENAME,
            content=encode_qr_png(credential),
            content_type="image/png",
            content_id=QR_CONTENT_ID,
        )
    return OutboundEmail(
        recipient=response.participant_email,
        subject=form.ticket_subject or f"Your Ticket for {event.title}",
        html_body=_render_html(response, event, form, form.include_qr),
        text_body=_render_text(response, event, form, form.include_qr),
        attachment=attachment,
    )


def issue(
    db: Session,
    response: FormResponse,
    transport: EmailTransport,
    issued_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """Derive the credential for ``response`` and hand the ticket to ``transport``.

    The check-in code is persisted before dispatch so a failed send can be
    retried with the same credential. Raises IssueError when the ticket cannot
    be rendered (e.g. the credential overflows the QR code) or delivered;
    the response itself is never rolled back.
    """
    event = db.get(Event, response.event_id)
    form = db.get(Form, response.form_id)
    if event is None or form is None:
        raise IssueError(f"Response {response.response_id} references a missing event or form")

    issued_at = issued_at or datetime.now(timezone.utc)
    if not response.check_in_code:
        response.check_in_code = make_check_in_code(response.response_id, issued_at)
        db.commit()

    try:
        credential = build_credential(response, event, response.check_in_code)
        message = render_ticket_email(response, event, form, credential)
    except (DataOverflowError, MessageError, pytz.UnknownTimeZoneError, ValueError) as exc:
        logger.warning("Ticket for response %s could not be rendered: %s", response.response_id, exc)
        raise IssueError(
            f"Ticket for response {response.response_id} could not be rendered",
            response_id=response.response_id,
        )

    try:
        transport.send(message)
    except EmailDeliveryError as exc:
        logger.warning("Ticket for response %s not delivered: %s", response.response_id, exc)
        raise IssueError(
            f"Ticket email to {response.participant_email} could not be sent",
            response_id=response.response_id,
        )

    response.ticket_sent_at = issued_at
    db.commit()
    logger.info("Issued ticket %s for response %s", response.check_in_code, response.response_id)
    return {
        "response_id": response.response_id,
        "check_in_code": response.check_in_code,
        "sent_at": issued_at,
        "credential": credential,
    }
