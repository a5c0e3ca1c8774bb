from contextlib import contextmanager
from typing import Iterator, Optional

import redis
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.core.config import settings
from eventhub.core.errors import (
    BookingNotFound,
    CapacityUnderBooked,
    DuplicateBooking,
    EventNotFound,
    InsufficientSeats,
    InvalidTickets,
    SeatLedgerBusy,
)
from eventhub.core.logging_utils import log_event, log_warning
from eventhub.core.redis_config import get_redis_client
from eventhub.models.bookings import Booking
from eventhub.models.events import Event


@contextmanager
def event_lock(event_id: int) -> Iterator[None]:
    """
    Hold the Redis lock guarding an event's seat counters.

    Every read-check-write of ``available_seats`` runs inside this lock, so only
    one request per event can be between its seat check and its commit.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(
        f"event_lock:{event_id}",
        timeout=settings.booking_lock_timeout_seconds,
        blocking_timeout=settings.booking_lock_blocking_timeout_seconds,
    )
    try:
        acquired = lock.acquire(blocking=True)
    except redis.exceptions.LockError:
        acquired = False
    if not acquired:
        log_warning("event_lock_timeout", event_id=event_id)
        raise SeatLedgerBusy()

    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockNotOwnedError:
            # lock expired while held; the transaction has already finished
            log_warning("event_lock_expired", event_id=event_id)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Commit everything done in the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def _get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFound()
    return event


def _find_booking(db: Session, event_id: int, user_id: int) -> Optional[Booking]:
    return db.scalar(
        select(Booking).where(Booking.event_id == event_id, Booking.user_id == user_id)
    )


def create_booking(
    db: Session,
    *,
    event_id: int,
    user_id: int,
    tickets: int = 1,
    contact_name: Optional[str] = None,
    contact_email: Optional[str] = None,
    contact_phone: Optional[str] = None,
) -> Booking:
    """
    Reserve ``tickets`` seats of an event for a user.

    The duplicate check, the seat decrement and the booking insert are committed
    together while the event lock is held.
    """
    if tickets < 1:
        raise InvalidTickets()

    with event_lock(event_id):
        try:
            with atomic(db):
                booking = _create_booking_in_transaction(
                    db,
                    event_id=event_id,
                    user_id=user_id,
                    tickets=tickets,
                    contact_name=contact_name,
                    contact_email=contact_email,
                    contact_phone=contact_phone,
                )
        except IntegrityError:
            # unique (event_id, user_id) caught a booking written outside the lock
            log_warning("booking_rejected", event_id=event_id, user_id=user_id, reason="duplicate")
            raise DuplicateBooking()
        except (DuplicateBooking, InsufficientSeats) as exc:
            log_warning("booking_rejected", event_id=event_id, user_id=user_id, reason=type(exc).__name__)
            raise

    db.refresh(booking)
    log_event("booking_created", booking_id=booking.id, event_id=event_id, user_id=user_id, tickets=tickets)
    return booking


def _create_booking_in_transaction(
    db: Session,
    *,
    event_id: int,
    user_id: int,
    tickets: int,
    contact_name: Optional[str],
    contact_email: Optional[str],
    contact_phone: Optional[str],
) -> Booking:
    """Internal function to create booking within a transaction."""
    _get_event(db, event_id)

    if _find_booking(db, event_id, user_id) is not None:
        raise DuplicateBooking()

    # Check capacity and decrement available_seats atomically
    stmt = (
        update(Event)
        .where(Event.id == event_id)
        .where(Event.available_seats >= tickets)
        .values(available_seats=Event.available_seats - tickets)
        .execution_options(synchronize_session=False)
    )
    res = db.execute(stmt)
    if res.rowcount != 1:  # type: ignore
        raise InsufficientSeats()

    booking = Booking(
        event_id=event_id,
        user_id=user_id,
        tickets=tickets,
        contact_name=contact_name,
        contact_email=contact_email,
        contact_phone=contact_phone,
    )
    db.add(booking)
    db.flush()  # gets booking.id
    return booking


def cancel_booking(db: Session, *, event_id: int, user_id: int) -> int:
    """Delete a user's booking and return its seats. Returns the new available-seat count."""
    with event_lock(event_id):
        with atomic(db):
            event = _get_event(db, event_id)
            booking = _find_booking(db, event_id, user_id)
            if booking is None:
                raise BookingNotFound()

            tickets = booking.tickets
            db.delete(booking)
            db.execute(
                update(Event)
                .where(Event.id == event_id)
                .values(available_seats=Event.available_seats + tickets)
                .execution_options(synchronize_session=False)
            )

        db.refresh(event)
        available_seats = event.available_seats

    log_event("booking_cancelled", event_id=event_id, user_id=user_id, tickets=tickets,
              available_seats=available_seats)
    return available_seats


def apply_capacity(event: Event, new_total_seats: int) -> None:
    """
    Resize an event while keeping already-booked seats booked.

    Caller must hold ``event_lock(event.id)`` and an open transaction.
    """
    booked = event.total_seats - event.available_seats
    if booked > new_total_seats:
        raise CapacityUnderBooked(
            f"{booked} seats are already booked; capacity cannot drop to {new_total_seats}"
        )
    event.available_seats = min(max(new_total_seats - booked, 0), new_total_seats)
    event.total_seats = new_total_seats


def update_event_capacity(db: Session, *, event_id: int, new_total_seats: int) -> Event:
    with event_lock(event_id):
        with atomic(db):
            event = _get_event(db, event_id)
            # re-read counters inside the lock
            db.refresh(event)
            old_total, old_available = event.total_seats, event.available_seats
            apply_capacity(event, new_total_seats)

    db.refresh(event)
    log_event(
        "event_capacity_updated",
        event_id=event_id,
        old_total_seats=old_total,
        old_available_seats=old_available,
        total_seats=event.total_seats,
        available_seats=event.available_seats,
    )
    return event


def list_event_bookings(db: Session, event_id: int) -> list[Booking]:
    _get_event(db, event_id)
    return list(
        db.scalars(select(Booking).where(Booking.event_id == event_id).order_by(Booking.id))
    )


def get_event_stats(db: Session, event_id: int) -> dict:
    event = db.get(Event, event_id)
    if not event:
        return {}

    bookings_count = db.scalar(
        select(func.count(Booking.id)).where(Booking.event_id == event_id)
    )

    return {
        "event_id": event.id,
        "total_seats": event.total_seats,
        "available_seats": event.available_seats,
        "booked_seats": event.total_seats - event.available_seats,
        "bookings_count": int(bookings_count or 0),
    }
