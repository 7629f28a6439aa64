"""Registration form API routes — nested under an event."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.deps import get_current_principal
from ticketing.models.user import User
from ticketing.schemas.form import FormCreate, FormOut, FormUpdate
from ticketing.services import form_service

router = APIRouter()


@router.post("/", response_model=FormOut, status_code=status.HTTP_201_CREATED)
def create_form(
    event_id: str,
    payload: FormCreate,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create a registration form (community admins only)."""
    return form_service.create_form(db, event_id, principal, payload)


@router.get("/", response_model=list[FormOut])
def list_forms(event_id: str, db: Session = Depends(get_db)):
    """List an event's forms."""
    return form_service.list_forms(db, event_id)


@router.get("/{form_id}", response_model=FormOut)
def get_form(event_id: str, form_id: str, db: Session = Depends(get_db)):
    """Fetch a form with its field definitions."""
    return form_service.get_form(db, event_id, form_id)


@router.put("/{form_id}", response_model=FormOut)
def update_form(
    event_id: str,
    form_id: str,
    payload: FormUpdate,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Edit a form's metadata or fields (community admins only)."""
    return form_service.update_form(db, event_id, form_id, principal, payload)
