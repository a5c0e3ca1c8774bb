from eventhub.models import bookings, events, reactions, tags  # noqa: F401
