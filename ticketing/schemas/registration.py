"""Pydantic schemas for form submissions and issued tickets."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class RegistrationCreate(BaseModel):
    # Bounded by the form_responses column widths
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    values: dict[str, Any] = {}


class RegistrationOut(BaseModel):
    response_id: str
    ticket_sent: bool


class ResponseOut(BaseModel):
    response_id: str
    form_id: str
    event_id: str
    user_id: Optional[str] = None
    participant_name: str
    participant_email: str
    values: dict[str, Any]
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[str] = None
    ticket_sent_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TicketOut(BaseModel):
    response_id: str
    check_in_code: str
    sent_at: datetime
