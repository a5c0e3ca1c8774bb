from fastapi import HTTPException

from eventhub.core.errors import (
    BookingNotFound,
    CapacityUnderBooked,
    DuplicateBooking,
    DuplicateTag,
    EventhubError,
    EventNotFound,
    InsufficientSeats,
    InvalidSchedule,
    InvalidTagName,
    InvalidTickets,
    NotAuthorized,
    SeatLedgerBusy,
    TagListInvalid,
    TagNotFound,
)

STATUS_CODES: dict[type[EventhubError], int] = {
    EventNotFound: 404,
    BookingNotFound: 404,
    TagNotFound: 404,
    DuplicateBooking: 409,
    InsufficientSeats: 409,
    CapacityUnderBooked: 409,
    DuplicateTag: 409,
    InvalidTickets: 400,
    InvalidSchedule: 400,
    TagListInvalid: 400,
    InvalidTagName: 400,
    NotAuthorized: 403,
    SeatLedgerBusy: 503,
}


def http_error(exc: EventhubError) -> HTTPException:
    return HTTPException(status_code=STATUS_CODES.get(type(exc), 400), detail=str(exc))
