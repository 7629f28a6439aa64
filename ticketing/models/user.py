"""User ORM model — the principal behind every authenticated request."""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from ticketing.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
