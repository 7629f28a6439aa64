"""Registration service — validates and persists form submissions.

A registration is complete once the response is committed. Ticket delivery
runs afterwards and a delivery failure is reported, never rolled back.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from ticketing.exceptions import (
    FormNotFound,
    IssueError,
    MalformedIdentifier,
    MissingRequiredField,
    NotFound,
)
from ticketing.models.form import Form
from ticketing.models.form_response import FormResponse
from ticketing.models.user import User
from ticketing.schemas.registration import RegistrationCreate
from ticketing.services import ticket_service
from ticketing.services.email_service import EmailTransport
from ticketing.services.form_schema import check_email_address, load_fields, validate_submission

logger = logging.getLogger(__name__)


def parse_identifier(name: str, value: str) -> str:
    """Return the canonical UUID string or raise MalformedIdentifier."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise MalformedIdentifier(name, value)


def get_event_form(db: Session, event_id: str, form_id: str) -> Form:
    """Load a form that belongs to the given event."""
    form = db.query(Form).filter(Form.form_id == form_id, Form.event_id == event_id).first()
    if not form:
        raise FormNotFound()
    return form


def _participant_identity(payload: RegistrationCreate, principal: Optional[User]) -> tuple[str, str]:
    name = (payload.name or "").strip() or (principal.display_name if principal else "")
    email = (payload.email or "").strip() or (principal.email if principal else "")
    if not name:
        raise MissingRequiredField("name")
    if not email:
        raise MissingRequiredField("email")
    return name, check_email_address("email", email)


def register(
    db: Session,
    event_id: str,
    form_id: str,
    principal: Optional[User],
    payload: RegistrationCreate,
    transport: EmailTransport,
) -> tuple[FormResponse, bool]:
    """Validate and persist a submission, then try to issue its ticket.

    Returns ``(response, ticket_sent)``. Validation errors propagate before
    anything is written.
    """
    event_id = parse_identifier("event_id", event_id)
    form_id = parse_identifier("form_id", form_id)
    form = get_event_form(db, event_id, form_id)

    name, email = _participant_identity(payload, principal)
    values = validate_submission(load_fields(form.fields), payload.values)

    response = FormResponse(
        form_id=form.form_id,
        event_id=form.event_id,
        user_id=principal.user_id if principal else None,
        participant_name=name,
        participant_email=email,
        values=values,
        checked_in=False,
        checked_in_at=None,
        checked_in_by=None,
    )
    db.add(response)
    db.commit()
    db.refresh(response)
    logger.info("Registered response %s for form %s (%s)", response.response_id, form.form_id, email)

    try:
        ticket_service.issue(db, response, transport)
        ticket_sent = True
    except IssueError as exc:
        logger.warning("Response %s persisted but ticket not sent: %s", response.response_id, exc.message)
        ticket_sent = False

    return response, ticket_sent


def get_response(db: Session, event_id: str, form_id: str, response_id: str) -> FormResponse:
    response = (
        db.query(FormResponse)
        .filter(
            FormResponse.response_id == parse_identifier("response_id", response_id),
            FormResponse.form_id == form_id,
            FormResponse.event_id == event_id,
        )
        .first()
    )
    if not response:
        raise NotFound("Response not found")
    return response


def list_responses(db: Session, form: Form) -> list[FormResponse]:
    return (
        db.query(FormResponse)
        .filter(FormResponse.form_id == form.form_id)
        .order_by(FormResponse.created_at)
        .all()
    )
