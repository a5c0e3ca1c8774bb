from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from eventhub.models.events import EventStatus, TargetAudience


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored event dates carry no timezone; aware input is converted to UTC first."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ---------- Event ----------
class EventCreate(BaseModel):
    name: str = Field(min_length=3, max_length=200)
    description: str = Field(default="", max_length=5000)
    event_type: str = Field(min_length=1, max_length=32)
    target_audience: TargetAudience = TargetAudience.ALL
    tags: list[str] = Field(default_factory=list)
    location: str = Field(default="", max_length=120)
    address: str = Field(default="", max_length=255)
    is_online: bool = False
    price: float = Field(default=0.0, ge=0)
    images: list[str] = Field(default_factory=list)
    start_date: datetime
    end_date: datetime
    total_seats: int = Field(ge=1)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class EventUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    event_type: Optional[str] = Field(default=None, min_length=1, max_length=32)
    target_audience: Optional[TargetAudience] = None
    tags: Optional[list[str]] = None
    location: Optional[str] = Field(default=None, max_length=120)
    address: Optional[str] = Field(default=None, max_length=255)
    is_online: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0)
    images: Optional[list[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_seats: Optional[int] = Field(default=None, ge=1)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)


class EventOut(BaseModel):
    id: int
    name: str
    description: str
    event_type: str
    target_audience: TargetAudience
    tags: list[str] = Field(validation_alias=AliasChoices("tag_names", "tags"))
    location: str
    address: str
    is_online: bool
    price: float
    images: list[str]
    start_date: datetime
    end_date: datetime
    total_seats: int
    available_seats: int
    status: EventStatus
    mood_score: int
    owner_id: int

    class Config:
        from_attributes = True


class EventStatsOut(BaseModel):
    event_id: int
    total_seats: int
    available_seats: int
    booked_seats: int
    bookings_count: int
