"""CheckIn ORM model — append-only admission record.

At most one row per (form, event, participant); the unique constraint is
what makes concurrent scans of the same ticket safe.
"""
import uuid
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, UniqueConstraint
from ticketing.database import Base


class CheckIn(Base):
    __tablename__ = "check_ins"

    check_in_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    form_id = Column(String(36), ForeignKey("forms.form_id"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    participant_id = Column(String(36), ForeignKey("form_responses.response_id"), nullable=False)
    participant_name = Column(String(200), nullable=True)
    participant_email = Column(String(255), nullable=True)
    check_in_code = Column(String(100), nullable=False)
    checked_in_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    checked_in_at = Column(DateTime(timezone=True), nullable=False)
    qr_data = Column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("form_id", "event_id", "participant_id", name="uq_check_in_form_event_participant"),
    )
