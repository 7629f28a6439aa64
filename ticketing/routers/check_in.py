"""Check-in API routes — gate operators scanning tickets."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.deps import get_current_principal
from ticketing.exceptions import Forbidden
from ticketing.models.user import User
from ticketing.schemas.check_in import CheckInOut, CheckInRequest, CheckInResult
from ticketing.services import check_in_service, form_service
from ticketing.services.authorization import can_check_in
from ticketing.services.registration_service import get_event_form, parse_identifier

router = APIRouter()


@router.post("/check-in", response_model=CheckInResult, response_model_exclude_none=True)
def check_in(
    event_id: str,
    form_id: str,
    payload: CheckInRequest,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Validate a scanned ticket. Scanning the same ticket again is safe."""
    return check_in_service.check_in(db, event_id, form_id, payload.qr_data, principal.user_id)


@router.get("/check-ins", response_model=list[CheckInOut])
def list_check_ins(
    event_id: str,
    form_id: str,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List admitted participants (admins and members)."""
    event = form_service.get_event(db, event_id)
    if not can_check_in(db, principal.user_id, event):
        raise Forbidden("Not authorized to view check-ins for this event")
    form = get_event_form(db, event.event_id, parse_identifier("form_id", form_id))
    return check_in_service.list_check_ins(db, form)
