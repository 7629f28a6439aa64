"""Registration form ORM model.

``fields`` holds the ordered list of field definitions as validated by
``services.form_schema``. Edits do not migrate existing response values.
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from ticketing.database import Base


class Form(Base):
    __tablename__ = "forms"

    form_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    fields = Column(JSON, nullable=False, default=list)

    # Ticket mail template
    ticket_subject = Column(String(255), nullable=True)
    ticket_message = Column(Text, nullable=False, default="")
    include_qr = Column(Boolean, nullable=False, default=True)

    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
