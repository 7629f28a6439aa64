"""Pydantic schemas for Communities."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class CommunityCreate(BaseModel):
    handle: str
    name: str


class CommunityOut(BaseModel):
    community_id: str
    handle: str
    name: str
    created_by: str
    created_at: datetime
    members: list[CommunityMemberOut] = []

    model_config = {"from_attributes": True}


class CommunityMemberAdd(BaseModel):
    user_id: str
    role: str = "member"


class CommunityMemberOut(BaseModel):
    user_id: str
    role: str
    joined_at: datetime

    model_config = {"from_attributes": True}


# Rebuild CommunityOut now that CommunityMemberOut is defined
CommunityOut.model_rebuild()
