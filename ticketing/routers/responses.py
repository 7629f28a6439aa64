"""Registration API routes — submissions, response listing and ticket re-send."""
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.deps import get_current_principal, get_optional_principal
from ticketing.models.user import User
from ticketing.schemas.registration import RegistrationCreate, RegistrationOut, ResponseOut, TicketOut
from ticketing.services import registration_service, ticket_service
from ticketing.services.email_service import EmailTransport, get_email_transport
from ticketing.services.form_service import get_managed_form

router = APIRouter()


@router.post("", response_model=RegistrationOut, status_code=status.HTTP_201_CREATED)
def register(
    event_id: str,
    form_id: str,
    payload: RegistrationCreate,
    principal: Optional[User] = Depends(get_optional_principal),
    transport: EmailTransport = Depends(get_email_transport),
    db: Session = Depends(get_db),
):
    """Submit a form. Anonymous submissions are accepted."""
    response, ticket_sent = registration_service.register(db, event_id, form_id, principal, payload, transport)
    return RegistrationOut(response_id=response.response_id, ticket_sent=ticket_sent)


@router.get("", response_model=list[ResponseOut])
def list_responses(
    event_id: str,
    form_id: str,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List a form's responses with check-in state (community admins only)."""
    form = get_managed_form(db, event_id, form_id, principal)
    return registration_service.list_responses(db, form)


@router.get("/{response_id}", response_model=ResponseOut)
def get_response(
    event_id: str,
    form_id: str,
    response_id: str,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Fetch one response (community admins only)."""
    form = get_managed_form(db, event_id, form_id, principal)
    return registration_service.get_response(db, form.event_id, form.form_id, response_id)


@router.post("/{response_id}/ticket", response_model=TicketOut)
def resend_ticket(
    event_id: str,
    form_id: str,
    response_id: str,
    principal: User = Depends(get_current_principal),
    transport: EmailTransport = Depends(get_email_transport),
    db: Session = Depends(get_db),
):
    """Re-send a ticket with the credential issued the first time."""
    form = get_managed_form(db, event_id, form_id, principal)
    response = registration_service.get_response(db, form.event_id, form.form_id, response_id)
    return ticket_service.issue(db, response, transport)
