"""Pydantic schemas for ticket check-in."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel


class CheckInRequest(BaseModel):
    # Decoded QR payload; shape is checked by the validator, not here
    qr_data: Optional[Any] = None


class CheckInResult(BaseModel):
    valid: bool
    already_checked_in: Optional[bool] = None
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[str] = None
    check_in_id: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None


class CheckInOut(BaseModel):
    check_in_id: str
    form_id: str
    event_id: str
    participant_id: str
    participant_name: Optional[str] = None
    participant_email: Optional[str] = None
    checked_in_by: str
    checked_in_at: datetime

    model_config = {"from_attributes": True}
