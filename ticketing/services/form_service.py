"""Form service — creates and edits registration forms for an event.

Field definitions go through the schema engine on every save. Edits are
allowed after responses exist; stored response values are left as they
were, so older responses may reference fields that no longer exist.
"""
import logging

from sqlalchemy.orm import Session

from ticketing.exceptions import EventNotFound, Forbidden
from ticketing.models.event import Event
from ticketing.models.form import Form
from ticketing.models.form_response import FormResponse
from ticketing.models.user import User
from ticketing.schemas.form import FormCreate, FormUpdate
from ticketing.services.authorization import can_manage
from ticketing.services.form_schema import dump_fields, validate_field_definitions
from ticketing.services.registration_service import get_event_form, parse_identifier

logger = logging.getLogger(__name__)


def get_event(db: Session, event_id: str) -> Event:
    event = db.get(Event, parse_identifier("event_id", event_id))
    if not event:
        raise EventNotFound()
    return event


def require_manager(db: Session, principal: User, event: Event) -> None:
    if not can_manage(db, principal.user_id, event):
        raise Forbidden("Only community admins may manage registrations for this event")


def create_form(db: Session, event_id: str, principal: User, payload: FormCreate) -> Form:
    event = get_event(db, event_id)
    require_manager(db, principal, event)

    fields = validate_field_definitions(payload.fields)
    form = Form(
        event_id=event.event_id,
        title=payload.title,
        description=payload.description,
        fields=dump_fields(fields),
        ticket_subject=payload.ticket_subject,
        ticket_message=payload.ticket_message,
        include_qr=payload.include_qr,
        created_by=principal.user_id,
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    logger.info("Created form '%s' (%s) for event %s with %d fields", form.title, form.form_id, event.event_id, len(fields))
    return form


def update_form(db: Session, event_id: str, form_id: str, principal: User, payload: FormUpdate) -> Form:
    event = get_event(db, event_id)
    require_manager(db, principal, event)
    form = get_event_form(db, event.event_id, parse_identifier("form_id", form_id))

    updates = payload.model_dump(exclude_unset=True, exclude={"fields"})
    if payload.fields is not None:
        form.fields = dump_fields(validate_field_definitions(payload.fields))
        response_count = db.query(FormResponse).filter(FormResponse.form_id == form.form_id).count()
        if response_count:
            logger.info(
                "Fields of form %s edited with %d existing responses; stored values are not migrated",
                form.form_id, response_count,
            )

    for field, value in updates.items():
        if value is not None or field == "ticket_subject":
            setattr(form, field, value)

    db.commit()
    db.refresh(form)
    logger.info("Updated form %s", form.form_id)
    return form


def get_form(db: Session, event_id: str, form_id: str) -> Form:
    event = get_event(db, event_id)
    return get_event_form(db, event.event_id, parse_identifier("form_id", form_id))


def list_forms(db: Session, event_id: str) -> list[Form]:
    event = get_event(db, event_id)
    return db.query(Form).filter(Form.event_id == event.event_id).order_by(Form.created_at).all()


def get_managed_form(db: Session, event_id: str, form_id: str, principal: User) -> Form:
    """Load a form after checking the principal may manage its event."""
    event = get_event(db, event_id)
    require_manager(db, principal, event)
    return get_event_form(db, event.event_id, parse_identifier("form_id", form_id))
