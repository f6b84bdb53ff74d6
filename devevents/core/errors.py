"""
Errors raised by the event and booking persistence layer.

Every error is raised synchronously from the validate-and-save call that
detected it. None of them are retried automatically.
"""

EVENT_NOT_FOUND_MESSAGE = "Event does not exist. Cannot create booking for non-existent event."


class DevEventsError(Exception):
    pass


class ValidationError(DevEventsError):
    """A single field failed a local constraint (required, length, format, non-empty array)."""

    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


class ReferentialError(DevEventsError):
    pass


class EventNotFoundError(ReferentialError):
    def __init__(self, message: str = EVENT_NOT_FOUND_MESSAGE):
        super().__init__(message)


class BookingNotFoundError(ReferentialError):
    def __init__(self, message: str = "Booking not found"):
        super().__init__(message)


class DuplicateConstraintError(DevEventsError):
    pass


class DuplicateSlugError(DuplicateConstraintError):
    def __init__(self, slug: str):
        super().__init__(f"An event with slug '{slug}' already exists")
        self.slug = slug


class StorageError(DevEventsError):
    pass


class DatabaseConnectionError(StorageError):
    pass
