import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.database.db import Base
from eventhub.models.tags import Tag


class EventStatus(str, enum.Enum):
    CREATED = "CREATED"
    VERIFIED = "VERIFIED"
    DECLINED = "DECLINED"


class TargetAudience(str, enum.Enum):
    KIDS = "KIDS"
    TEENS = "TEENS"
    ADULTS = "ADULTS"
    SENIORS = "SENIORS"
    ALL = "ALL"


event_tags = Table(
    "event_tags",
    Base.metadata,
    Column("event_id", ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="ck_events_available_seats_non_negative"),
        CheckConstraint("available_seats <= total_seats", name="ck_events_available_within_total"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    target_audience: Mapped[str] = mapped_column(String(16), nullable=False, default=TargetAudience.ALL.value)
    location: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    total_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    available_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=EventStatus.CREATED.value, index=True)
    mood_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    tags: Mapped[list[Tag]] = relationship(secondary=event_tags, lazy="selectin")
    bookings: Mapped[list["Booking"]] = relationship(back_populates="event", cascade="all, delete-orphan")
    likes: Mapped[list["Like"]] = relationship(cascade="all, delete-orphan")
    bookmarks: Mapped[list["Bookmark"]] = relationship(cascade="all, delete-orphan")

    @property
    def booked_seats(self) -> int:
        return self.total_seats - self.available_seats

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]
