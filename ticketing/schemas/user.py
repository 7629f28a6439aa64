"""Pydantic schemas for Users."""
from datetime import datetime
from pydantic import BaseModel, EmailStr


class UserCreate(BaseModel):
    display_name: str
    email: EmailStr


class UserOut(BaseModel):
    user_id: str
    display_name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}
