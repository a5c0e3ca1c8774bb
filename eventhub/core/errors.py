"""Domain errors raised by the services and mapped to HTTP responses by the routers."""


class EventhubError(Exception):
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class EventNotFound(EventhubError):
    default_message = "Event not found"


class BookingNotFound(EventhubError):
    default_message = "Booking not found"


class DuplicateBooking(EventhubError):
    default_message = "User has already booked this event"


class InsufficientSeats(EventhubError):
    default_message = "Not enough available seats"


class CapacityUnderBooked(EventhubError):
    default_message = "New capacity is lower than the number of booked seats"


class InvalidTickets(EventhubError):
    default_message = "At least one ticket must be booked"


class TagListInvalid(EventhubError):
    default_message = "Tags must be a list of strings"


class NotAuthorized(EventhubError):
    default_message = "Not allowed action"


class SeatLedgerBusy(EventhubError):
    default_message = "Could not acquire lock, please try again."


class InvalidSchedule(EventhubError):
    default_message = "end_date must be after start_date"


class TagNotFound(EventhubError):
    default_message = "Tag not found"


class InvalidTagName(EventhubError):
    default_message = "Tag name must not be blank"


class DuplicateTag(EventhubError):
    default_message = "A tag with this name already exists"
