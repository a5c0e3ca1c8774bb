from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, get_caller
from eventhub.core.errors import EventhubError
from eventhub.database.db import get_db
from eventhub.routes.errors import http_error
from eventhub.schemas.bookings import BookingOut
from eventhub.schemas.events import EventCreate, EventOut, EventStatsOut, EventUpdate
from eventhub.services import events as event_service
from eventhub.services.bookings import get_event_stats, list_event_bookings

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventOut)
def create_event(payload: EventCreate, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        return event_service.create_event(db, caller, payload)
    except EventhubError as e:
        raise http_error(e)


@router.get("", response_model=list[EventOut])
def list_events(db: Session = Depends(get_db)):
    return event_service.list_events(db)


# declared before /{event_id} so "me" is not parsed as an id
@router.get("/me", response_model=list[EventOut])
def my_events(db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return event_service.list_owner_events(db, caller.id)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    try:
        return event_service.get_event(db, event_id)
    except EventhubError as e:
        raise http_error(e)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    try:
        return event_service.update_event(db, caller, event_id, payload)
    except EventhubError as e:
        raise http_error(e)


@router.delete("/{event_id}", status_code=204)
def delete_event(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        event_service.delete_event(db, caller, event_id)
    except EventhubError as e:
        raise http_error(e)


@router.post("/{event_id}/verify", response_model=EventOut)
def verify_event(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        return event_service.verify_event(db, caller, event_id)
    except EventhubError as e:
        raise http_error(e)


@router.post("/{event_id}/decline", response_model=EventOut)
def decline_event(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        return event_service.decline_event(db, caller, event_id)
    except EventhubError as e:
        raise http_error(e)


@router.get("/{event_id}/stats", response_model=EventStatsOut)
def event_stats(event_id: int, db: Session = Depends(get_db)):
    stats = get_event_stats(db, event_id)
    if not stats:
        raise HTTPException(status_code=404, detail="Event not found")
    return stats


@router.get("/{event_id}/bookings", response_model=list[BookingOut])
def event_bookings(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """Bookings of an event, visible to its owner and admins."""
    try:
        event = event_service.get_event(db, event_id)
        if not caller.is_admin and event.owner_id != caller.id:
            raise HTTPException(status_code=403, detail="You are not authorized to view these bookings")
        return list_event_bookings(db, event_id)
    except EventhubError as e:
        raise http_error(e)
