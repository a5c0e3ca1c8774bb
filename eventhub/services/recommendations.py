"""
Rule-based recommendations.

Every supplied criterion narrows the candidate set; only VERIFIED events are ever
returned. Results are ordered soonest first and carry like/bookmark flags for the
caller.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from eventhub.models.events import Event, EventStatus, TargetAudience
from eventhub.models.reactions import Bookmark, Like
from eventhub.services.reactions import reacted_event_ids

ONLINE_LOCATION = "online"


class Mood(str, enum.Enum):
    HAPPY = "HAPPY"
    NEUTRAL = "NEUTRAL"
    SAD = "SAD"


# Inclusive score ranges; the bands overlap at their edges.
MOOD_BANDS: dict[Mood, tuple[int, int]] = {
    Mood.HAPPY: (0, 100),
    Mood.NEUTRAL: (-5, 5),
    Mood.SAD: (-100, 0),
}


class DateOption(str, enum.Enum):
    TODAY = "TODAY"
    TOMORROW = "TOMORROW"
    THIS_WEEK = "THIS_WEEK"


class PriceOption(str, enum.Enum):
    FREE = "FREE"
    PAID = "PAID"


@dataclass(frozen=True)
class RecommendationCriteria:
    age_group: Optional[TargetAudience] = None
    mood: Optional[Mood] = None
    location: Optional[str] = None
    online: Optional[bool] = None
    date_option: Optional[DateOption] = None
    specific_date: Optional[date] = None
    price_option: Optional[PriceOption] = None


@dataclass
class Recommendation:
    event: Event
    is_liked: bool = False
    is_bookmarked: bool = False


def resolve_date_window(
    now: datetime,
    date_option: Optional[DateOption] = None,
    specific_date: Optional[date] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Return ``(start_inclusive, end_exclusive)`` bounds on event start; ``None`` means open."""
    if specific_date is not None:
        day_start = datetime.combine(specific_date, time.min)
        return day_start, day_start + timedelta(days=1)

    today = datetime.combine(now.date(), time.min)
    tomorrow = today + timedelta(days=1)
    if date_option == DateOption.TODAY:
        return today, tomorrow
    if date_option == DateOption.TOMORROW:
        return tomorrow, None
    if date_option == DateOption.THIS_WEEK:
        # inclusive upper edge: now + 7 days
        return now, now + timedelta(days=7, microseconds=1)
    return None, None


def build_query(criteria: RecommendationCriteria, now: datetime) -> Select:
    stmt = select(Event).where(Event.status == EventStatus.VERIFIED.value)

    if criteria.age_group is not None:
        stmt = stmt.where(Event.target_audience == criteria.age_group.value)

    if criteria.mood is not None:
        low, high = MOOD_BANDS[criteria.mood]
        stmt = stmt.where(Event.mood_score.between(low, high))

    location = (criteria.location or "").strip()
    if location:
        if location.lower() == ONLINE_LOCATION:
            stmt = stmt.where(Event.is_online.is_(True))
        else:
            stmt = stmt.where(func.lower(Event.location) == location.lower())

    if criteria.online is not None:
        stmt = stmt.where(Event.is_online.is_(criteria.online))

    start, end = resolve_date_window(now, criteria.date_option, criteria.specific_date)
    if start is not None:
        stmt = stmt.where(Event.start_date >= start)
    if end is not None:
        stmt = stmt.where(Event.start_date < end)

    if criteria.price_option == PriceOption.FREE:
        stmt = stmt.where(Event.price == 0)
    elif criteria.price_option == PriceOption.PAID:
        stmt = stmt.where(Event.price > 0)

    return stmt.order_by(Event.start_date.asc(), Event.id.asc())


def recommend_events(
    db: Session,
    criteria: RecommendationCriteria,
    *,
    user_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[Recommendation]:
    now = now or datetime.now()
    events = list(db.scalars(build_query(criteria, now)))

    liked: set[int] = set()
    bookmarked: set[int] = set()
    if user_id is not None and events:
        ids = [event.id for event in events]
        liked = reacted_event_ids(db, Like, user_id, ids)
        bookmarked = reacted_event_ids(db, Bookmark, user_id, ids)

    return [
        Recommendation(event=event, is_liked=event.id in liked, is_bookmarked=event.id in bookmarked)
        for event in events
    ]
