from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller
from eventhub.core.errors import DuplicateTag, InvalidTagName, NotAuthorized, TagListInvalid, TagNotFound
from eventhub.core.logging_utils import log_event
from eventhub.models.events import Event
from eventhub.models.tags import Tag, tag_slug
from eventhub.services.bookings import atomic
from eventhub.services.scoring import evaluate_event, get_lexicon


def get_tag_by_name(db: Session, name: str) -> Tag | None:
    return db.scalar(select(Tag).where(Tag.slug == tag_slug(name)))


def get_tag(db: Session, tag_id: int) -> Tag:
    tag = db.get(Tag, tag_id)
    if tag is None:
        raise TagNotFound()
    return tag


def get_or_create_tag(db: Session, name: str) -> Tag:
    """Case-insensitive get-or-create. Flushes but does not commit."""
    slug = tag_slug(name)
    if not slug:
        raise InvalidTagName()

    existing = get_tag_by_name(db, name)
    if existing is not None:
        return existing

    # unique slug keeps concurrent creators from producing two rows
    tag = Tag(name=name.strip(), slug=slug)
    db.add(tag)
    db.flush()
    return tag


def resolve_tags(db: Session, tags: Any) -> list[Tag]:
    if tags is None:
        return []
    if not isinstance(tags, (list, tuple)) or not all(isinstance(t, str) for t in tags):
        raise TagListInvalid()

    resolved: list[Tag] = []
    seen: set[str] = set()
    for name in tags:
        slug = tag_slug(name)
        if not slug or slug in seen:
            continue
        seen.add(slug)
        resolved.append(get_or_create_tag(db, name))
    return resolved


def list_tags(db: Session) -> list[Tag]:
    return list(db.scalars(select(Tag).order_by(Tag.slug)))


def _ensure_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise NotAuthorized("Only admins can manage tags")


def _tagged_events(db: Session, tag_id: int) -> list[Event]:
    return list(db.scalars(select(Event).where(Event.tags.any(Tag.id == tag_id)).order_by(Event.id)))


def _rescore(events: list[Event]) -> None:
    # tag names feed the mood score
    lexicon = get_lexicon()
    for event in events:
        event.mood_score = evaluate_event(event.name, event.description, event.event_type, event.tag_names, lexicon)


def update_tag(db: Session, caller: Caller, tag_id: int, name: str) -> Tag:
    """Rename a tag. A name whose slug belongs to another tag is rejected."""
    _ensure_admin(caller)
    slug = tag_slug(name)
    if not slug:
        raise InvalidTagName()

    with atomic(db):
        tag = get_tag(db, tag_id)
        clash = get_tag_by_name(db, name)
        if clash is not None and clash.id != tag.id:
            raise DuplicateTag()
        tag.name = name.strip()
        tag.slug = slug
        _rescore(_tagged_events(db, tag_id))

    db.refresh(tag)
    log_event("tag_updated", tag_id=tag_id, slug=slug, actor_user_id=caller.id)
    return tag


def delete_tag(db: Session, caller: Caller, tag_id: int) -> None:
    """Delete a tag and detach it from every event that carried it."""
    _ensure_admin(caller)
    with atomic(db):
        tag = get_tag(db, tag_id)
        events = _tagged_events(db, tag_id)
        for event in events:
            event.tags.remove(tag)
        _rescore(events)
        db.delete(tag)
    log_event("tag_deleted", tag_id=tag_id, detached_events=len(events), actor_user_id=caller.id)
