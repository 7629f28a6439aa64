"""Check-in validator — admits each ticket at most once.

Preconditions are checked in a fixed order so every failure has a distinct
cause:
1. event/form ids are UUIDs            -> MalformedIdentifier
2. QR payload has participantId + code -> MalformedCredential
3. event exists                        -> EventNotFound
4. scanner is admin or member          -> Forbidden
5. form exists under the event         -> FormNotFound
6. response exists for the participant -> {"valid": False} result

The admit step relies on the unique constraint over
(form_id, event_id, participant_id): the scanner that loses a race gets an
IntegrityError, rolls back and reports the winner's record as
"already checked in".
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.exceptions import EventNotFound, Forbidden, FormNotFound, MalformedCredential
from ticketing.models.check_in import CheckIn
from ticketing.models.event import Event
from ticketing.models.form import Form
from ticketing.models.form_response import FormResponse
from ticketing.schemas.check_in import CheckInResult
from ticketing.services.authorization import can_check_in
from ticketing.services.registration_service import parse_identifier

logger = logging.getLogger(__name__)

PARTICIPANT_NOT_FOUND = "participant not found for this form"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Storage may drop tzinfo (SQLite); timestamps are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_credential(qr_data: Any) -> tuple[str, str]:
    if not isinstance(qr_data, dict):
        raise MalformedCredential()
    participant_id = qr_data.get("participantId")
    code = qr_data.get("checkInCode")
    if not isinstance(participant_id, str) or not participant_id.strip():
        raise MalformedCredential()
    if not isinstance(code, str) or not code.strip():
        raise MalformedCredential()
    try:
        participant_id = str(uuid.UUID(participant_id.strip()))
    except ValueError:
        raise MalformedCredential("Invalid participant id in QR code data")
    return participant_id, code.strip()


def _find_check_in(db: Session, form_id: str, event_id: str, participant_id: str) -> Optional[CheckIn]:
    return (
        db.query(CheckIn)
        .filter(
            CheckIn.form_id == form_id,
            CheckIn.event_id == event_id,
            CheckIn.participant_id == participant_id,
        )
        .first()
    )


def _already_checked_in(record: CheckIn) -> CheckInResult:
    return CheckInResult(
        valid=True,
        already_checked_in=True,
        checked_in_at=_as_utc(record.checked_in_at),
        checked_in_by=record.checked_in_by,
        message="Ticket was already checked in",
    )


def check_in(
    db: Session,
    event_id: str,
    form_id: str,
    qr_data: Any,
    principal_id: str,
) -> CheckInResult:
    """Validate a scanned ticket and admit its holder exactly once."""
    event_id = parse_identifier("event_id", event_id)
    form_id = parse_identifier("form_id", form_id)
    participant_id, code = _parse_credential(qr_data)

    event = db.get(Event, event_id)
    if not event:
        raise EventNotFound()

    if not can_check_in(db, principal_id, event):
        raise Forbidden("Not authorized to scan tickets for this event")

    form = db.query(Form).filter(Form.form_id == form_id, Form.event_id == event_id).first()
    if not form:
        raise FormNotFound()

    response = (
        db.query(FormResponse)
        .filter(
            FormResponse.response_id == participant_id,
            FormResponse.form_id == form_id,
            FormResponse.event_id == event_id,
        )
        .first()
    )
    if not response:
        logger.info("Scan of unknown participant %s for form %s", participant_id, form_id)
        return CheckInResult(valid=False, reason=PARTICIPANT_NOT_FOUND)

    existing = _find_check_in(db, form_id, event_id, participant_id)
    if existing:
        return _already_checked_in(existing)

    now = datetime.now(timezone.utc)
    record = CheckIn(
        form_id=form_id,
        event_id=event_id,
        participant_id=participant_id,
        participant_name=qr_data.get("name") if isinstance(qr_data.get("name"), str) else None,
        participant_email=qr_data.get("email") if isinstance(qr_data.get("email"), str) else None,
        check_in_code=code,
        checked_in_by=principal_id,
        checked_in_at=now,
        qr_data=qr_data,
    )
    try:
        db.add(record)
        db.flush()
        response.checked_in = True
        response.checked_in_at = now
        response.checked_in_by = principal_id
        db.commit()
    except IntegrityError:
        # Another scanner admitted this participant first
        db.rollback()
        winner = _find_check_in(db, form_id, event_id, participant_id)
        if winner is None:
            raise
        logger.info("Concurrent scan of participant %s resolved to existing check-in", participant_id)
        return _already_checked_in(winner)

    db.refresh(record)
    logger.info("Checked in participant %s for form %s by %s", participant_id, form_id, principal_id)
    return CheckInResult(
        valid=True,
        already_checked_in=False,
        check_in_id=record.check_in_id,
        checked_in_at=_as_utc(record.checked_in_at),
        checked_in_by=record.checked_in_by,
        message="Successfully checked in",
    )


def list_check_ins(db: Session, form: Form) -> list[CheckIn]:
    return (
        db.query(CheckIn)
        .filter(CheckIn.form_id == form.form_id)
        .order_by(CheckIn.checked_in_at)
        .all()
    )
