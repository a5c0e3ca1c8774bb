from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, get_caller
from eventhub.core.errors import EventhubError
from eventhub.database.db import get_db
from eventhub.routes.errors import http_error
from eventhub.schemas.bookings import BookingOut, BookRequest, CancelBookingOut
from eventhub.services.bookings import cancel_booking, create_booking

router = APIRouter(prefix="/events", tags=["bookings"])


@router.post("/{event_id}/book", response_model=BookingOut)
def book_event(
    event_id: int,
    payload: BookRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    try:
        return create_booking(
            db,
            event_id=event_id,
            user_id=caller.id,
            tickets=payload.tickets,
            contact_name=payload.contact_name,
            contact_email=payload.contact_email or caller.email,
            contact_phone=payload.contact_phone,
        )
    except EventhubError as e:
        raise http_error(e)


@router.delete("/{event_id}/book", response_model=CancelBookingOut)
def cancel_event_booking(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        available_seats = cancel_booking(db, event_id=event_id, user_id=caller.id)
    except EventhubError as e:
        raise http_error(e)
    return {"event_id": event_id, "available_seats": available_seats}
