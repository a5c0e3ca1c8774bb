from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BookRequest(BaseModel):
    tickets: int = Field(default=1, ge=1)
    contact_name: Optional[str] = Field(default=None, max_length=120)
    contact_email: Optional[str] = Field(default=None, max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=32)


class BookingOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    tickets: int
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CancelBookingOut(BaseModel):
    event_id: int
    available_seats: int
