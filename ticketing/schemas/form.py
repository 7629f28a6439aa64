"""Pydantic schemas for registration forms."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ticketing.services.form_schema import FormField


def _single_line_subject(value: Optional[str]) -> Optional[str]:
    # Becomes a mail header; CR/LF would start a new header
    if value is not None and ("\r" in value or "\n" in value):
        raise ValueError("Ticket subject must be a single line")
    return value


class FormCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    fields: list[FormField] = []
    ticket_subject: Optional[str] = Field(None, max_length=255)
    ticket_message: str = ""
    include_qr: bool = True

    @field_validator("ticket_subject")
    @classmethod
    def validate_ticket_subject(cls, v: Optional[str]) -> Optional[str]:
        return _single_line_subject(v)


class FormUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    fields: Optional[list[FormField]] = None
    ticket_subject: Optional[str] = Field(None, max_length=255)
    ticket_message: Optional[str] = None
    include_qr: Optional[bool] = None

    @field_validator("ticket_subject")
    @classmethod
    def validate_ticket_subject(cls, v: Optional[str]) -> Optional[str]:
        return _single_line_subject(v)


class FormOut(BaseModel):
    form_id: str
    event_id: str
    title: str
    description: str
    fields: list[FormField]
    ticket_subject: Optional[str] = None
    ticket_message: str
    include_qr: bool
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
