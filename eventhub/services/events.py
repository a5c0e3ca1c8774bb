"""
Event lifecycle: creation, owner/admin edits, deletion, moderation and mood re-scoring.

Every write that touches an event's seat counters goes through ``event_lock`` so it
serializes with bookings and cancellations of the same event.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, UserStatus
from eventhub.core.errors import EventNotFound, InvalidSchedule, NotAuthorized
from eventhub.core.logging_utils import log_event
from eventhub.models.events import Event, EventStatus
from eventhub.schemas.events import EventCreate, EventUpdate
from eventhub.services.bookings import apply_capacity, atomic, event_lock
from eventhub.services.scoring import MoodLexicon, evaluate_event, get_lexicon
from eventhub.services.tags import resolve_tags


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFound()
    return event


def list_events(db: Session) -> list[Event]:
    return list(db.scalars(select(Event).order_by(Event.start_date, Event.id)))


def list_owner_events(db: Session, owner_id: int) -> list[Event]:
    """Events created by one user, whatever their moderation status."""
    return list(
        db.scalars(select(Event).where(Event.owner_id == owner_id).order_by(Event.start_date, Event.id))
    )


def score_event(event: Event, lexicon: Optional[MoodLexicon] = None) -> int:
    lexicon = lexicon or get_lexicon()
    return evaluate_event(event.name, event.description, event.event_type, event.tag_names, lexicon)


def _ensure_can_edit(caller: Caller, event: Event) -> None:
    if not caller.is_admin and event.owner_id != caller.id:
        raise NotAuthorized("You are not authorized to modify this event")


def create_event(
    db: Session, caller: Caller, payload: EventCreate, lexicon: Optional[MoodLexicon] = None
) -> Event:
    status = EventStatus.VERIFIED if caller.status == UserStatus.VERIFIED_USER else EventStatus.CREATED

    with atomic(db):
        event = Event(
            name=payload.name,
            description=payload.description,
            event_type=payload.event_type.upper(),
            target_audience=payload.target_audience.value,
            location=payload.location,
            address=payload.address,
            is_online=payload.is_online,
            price=payload.price,
            images=list(payload.images),
            start_date=payload.start_date,
            end_date=payload.end_date,
            total_seats=payload.total_seats,
            available_seats=payload.total_seats,
            status=status.value,
            owner_id=caller.id,
        )
        event.tags = resolve_tags(db, payload.tags)
        event.mood_score = score_event(event, lexicon)
        db.add(event)

    db.refresh(event)
    log_event("event_created", event_id=event.id, owner_id=caller.id, status=event.status,
              mood_score=event.mood_score)
    return event


def update_event(
    db: Session,
    caller: Caller,
    event_id: int,
    payload: EventUpdate,
    lexicon: Optional[MoodLexicon] = None,
) -> Event:
    changes = payload.model_dump(exclude_unset=True)
    new_total_seats = changes.pop("total_seats", None)
    new_tags = changes.pop("tags", None)

    with event_lock(event_id):
        with atomic(db):
            event = get_event(db, event_id)
            _ensure_can_edit(caller, event)
            db.refresh(event)

            for field, value in changes.items():
                if value is None:
                    continue
                if field == "target_audience":
                    value = value.value
                elif field == "event_type":
                    value = value.upper()
                setattr(event, field, value)

            if new_tags is not None:
                event.tags = resolve_tags(db, new_tags)

            if event.end_date <= event.start_date:
                raise InvalidSchedule()

            if new_total_seats is not None and new_total_seats != event.total_seats:
                apply_capacity(event, new_total_seats)

            event.mood_score = score_event(event, lexicon)

    db.refresh(event)
    log_event("event_updated", event_id=event.id, actor_user_id=caller.id, mood_score=event.mood_score,
              total_seats=event.total_seats, available_seats=event.available_seats)
    return event


def delete_event(db: Session, caller: Caller, event_id: int) -> None:
    with event_lock(event_id):
        with atomic(db):
            event = get_event(db, event_id)
            _ensure_can_edit(caller, event)
            db.delete(event)
    log_event("event_deleted", event_id=event_id, actor_user_id=caller.id)


def set_event_status(db: Session, caller: Caller, event_id: int, status: EventStatus) -> Event:
    if not caller.is_admin:
        raise NotAuthorized("Only admins can moderate events")
    with atomic(db):
        event = get_event(db, event_id)
        event.status = status.value
    db.refresh(event)
    log_event("event_moderated", event_id=event_id, status=status.value, actor_user_id=caller.id)
    return event


def verify_event(db: Session, caller: Caller, event_id: int) -> Event:
    return set_event_status(db, caller, event_id, EventStatus.VERIFIED)


def decline_event(db: Session, caller: Caller, event_id: int) -> Event:
    return set_event_status(db, caller, event_id, EventStatus.DECLINED)


def rescore_event(db: Session, event_id: int, lexicon: Optional[MoodLexicon] = None) -> int:
    with atomic(db):
        event = get_event(db, event_id)
        event.mood_score = score_event(event, lexicon)
        score = event.mood_score
    log_event("event_rescored", event_id=event_id, mood_score=score)
    return score


def rescore_all_events(db: Session, lexicon: Optional[MoodLexicon] = None) -> int:
    """Recompute every stored mood score. Returns the number of events touched."""
    lexicon = lexicon or get_lexicon()
    count = 0
    with atomic(db):
        for event in db.scalars(select(Event).order_by(Event.id)):
            event.mood_score = score_event(event, lexicon)
            count += 1
    log_event("events_rescored", count=count)
    return count
