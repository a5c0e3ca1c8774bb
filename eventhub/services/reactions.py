"""Idempotent like/bookmark membership for (user, event) pairs."""

from typing import Type

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.core.errors import EventNotFound
from eventhub.models.events import Event
from eventhub.models.reactions import Bookmark, Like

Reaction = Type[Like] | Type[Bookmark]


def _ensure_event(db: Session, event_id: int) -> None:
    if db.get(Event, event_id) is None:
        raise EventNotFound()


def _add(db: Session, model: Reaction, event_id: int, user_id: int) -> bool:
    _ensure_event(db, event_id)
    exists = db.scalar(select(model.id).where(model.event_id == event_id, model.user_id == user_id))
    if exists is None:
        db.add(model(event_id=event_id, user_id=user_id))
        try:
            db.commit()
        except IntegrityError:
            # concurrent duplicate click
            db.rollback()
    return True


def _remove(db: Session, model: Reaction, event_id: int, user_id: int) -> bool:
    _ensure_event(db, event_id)
    db.execute(delete(model).where(model.event_id == event_id, model.user_id == user_id))
    db.commit()
    return False


def like_event(db: Session, *, event_id: int, user_id: int) -> bool:
    return _add(db, Like, event_id, user_id)


def unlike_event(db: Session, *, event_id: int, user_id: int) -> bool:
    return _remove(db, Like, event_id, user_id)


def bookmark_event(db: Session, *, event_id: int, user_id: int) -> bool:
    return _add(db, Bookmark, event_id, user_id)


def unbookmark_event(db: Session, *, event_id: int, user_id: int) -> bool:
    return _remove(db, Bookmark, event_id, user_id)


def reacted_event_ids(db: Session, model: Reaction, user_id: int, event_ids: list[int]) -> set[int]:
    if not event_ids:
        return set()
    return set(
        db.scalars(select(model.event_id).where(model.user_id == user_id, model.event_id.in_(event_ids)))
    )
