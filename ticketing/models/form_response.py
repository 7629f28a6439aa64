"""FormResponse ORM model — one participant's submission of a form.

The response id doubles as the ``participantId`` embedded in the ticket.
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from ticketing.database import Base


class FormResponse(Base):
    __tablename__ = "form_responses"

    response_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    form_id = Column(String(36), ForeignKey("forms.form_id"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    participant_name = Column(String(200), nullable=False)
    participant_email = Column(String(255), nullable=False)
    values = Column(JSON, nullable=False, default=dict)

    # Written only by the check-in validator
    checked_in = Column(Boolean, nullable=False, default=False)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    checked_in_by = Column(String(36), ForeignKey("users.user_id"), nullable=True)

    # Written only by the ticket issuer
    check_in_code = Column(String(100), nullable=True)
    ticket_sent_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
