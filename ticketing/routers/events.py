"""Event API routes."""
import logging
import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.deps import get_current_principal
from ticketing.exceptions import Forbidden
from ticketing.models.community import Community
from ticketing.models.event import Event
from ticketing.models.user import User
from ticketing.schemas.event import EventCreate, EventOut
from ticketing.services.authorization import get_community_role
from ticketing.services.form_service import get_event

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create an event owned by a community the caller belongs to."""
    community = db.get(Community, payload.community_id)
    if not community:
        raise HTTPException(status_code=404, detail="Community not found")
    if get_community_role(db, principal.user_id, community.community_id) is None:
        raise Forbidden("Not authorized to create events")
    try:
        pytz.timezone(payload.timezone)
    except pytz.UnknownTimeZoneError:
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {payload.timezone}")

    event = Event(**payload.model_dump(), created_by=principal.user_id)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) in community %s", event.title, event.event_id, community.community_id)
    return event


@router.get("/{event_id}", response_model=EventOut)
def get_event_detail(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single event by ID."""
    return get_event(db, event_id)
