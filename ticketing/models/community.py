"""Community and CommunityMember ORM models.

A community owns events. Membership rows carry the role the
authorization gate reads: ``admin`` or ``member`` (volunteers are members).
"""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ticketing.database import Base


class CommunityRole(str, enum.Enum):
    admin = "admin"
    member = "member"


class Community(Base):
    __tablename__ = "communities"

    community_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    handle = Column(String(100), nullable=False, unique=True)
    name = Column(String(150), nullable=False)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("CommunityMember", back_populates="community", cascade="all, delete-orphan")


class CommunityMember(Base):
    __tablename__ = "community_members"

    community_id = Column(String(36), ForeignKey("communities.community_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    role = Column(SAEnum(CommunityRole), nullable=False, default=CommunityRole.member)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    community = relationship("Community", back_populates="members")
