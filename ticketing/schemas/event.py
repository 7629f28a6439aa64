"""Pydantic schemas for Events."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    community_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    location: str = Field("", max_length=500)
    start_time_utc: datetime
    end_time_utc: Optional[datetime] = None
    timezone: str = "UTC"


class EventOut(BaseModel):
    event_id: str
    community_id: str
    title: str
    description: str
    location: str
    start_time_utc: datetime
    end_time_utc: Optional[datetime] = None
    timezone: str
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}
