import logging
from typing import Any, Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from devevents.core.errors import (
    BookingNotFoundError,
    EventNotFoundError,
    ValidationError,
)
from devevents.database.db import storage_errors
from devevents.models.bookings import BOOKING_FIELDS, Booking
from devevents.models.events import Event
from devevents.services.events import find_event_by_id, utcnow
from devevents.services.normalization import is_valid_email, normalize_email

logger = logging.getLogger(__name__)

INVALID_EMAIL_MESSAGE = "Please provide a valid email address"

EventLookup = Callable[[Any], Optional[Event]]


class BookingValidator:
    """
    Validates and normalizes booking records.

    The event lookup is passed in rather than imported so the booking
    rules do not depend on how events are stored.
    """

    def __init__(self, find_event_by_id: EventLookup):
        self.find_event_by_id = find_event_by_id

    def validate(self, data: dict, *, changed_fields: Optional[set[str]] = None) -> dict:
        """
        Return the normalized booking fields.

        The referenced event is looked up only when ``event_id`` is new or
        modified (``changed_fields`` is ``None`` for a first persist).

        Raises:
            ValidationError: A required field is missing or the email is malformed.
            EventNotFoundError: ``event_id`` does not resolve to an event.
        """
        event_id = data.get("event_id")
        if event_id is None or event_id == "":
            raise ValidationError("event_id", "Event ID is required")

        email = data.get("email")
        if email is None or (isinstance(email, str) and not email.strip()):
            raise ValidationError("email", "Email is required")
        if not isinstance(email, str):
            raise ValidationError("email", INVALID_EMAIL_MESSAGE)

        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationError("email", INVALID_EMAIL_MESSAGE)

        if changed_fields is None or "event_id" in changed_fields:
            event = self.find_event_by_id(event_id)
            if event is None:
                logger.warning("Rejected booking for %s: event %r does not exist", email, event_id)
                raise EventNotFoundError()
            event_id = event.id

        return {"event_id": event_id, "email": email}


def _event_lookup(db: Session) -> EventLookup:
    def lookup(event_id: Any) -> Optional[Event]:
        return find_event_by_id(db, event_id)

    return lookup


def _commit_booking(db: Session, booking: Booking) -> None:
    with storage_errors("save booking", db):
        db.commit()
        db.refresh(booking)


def validate_and_save_booking(db: Session, draft: dict) -> Booking:
    """Validate a new booking, check its event exists, then insert it."""
    values = BookingValidator(_event_lookup(db)).validate(draft)

    now = utcnow()
    booking = Booking(**values, created_at=now, updated_at=now)
    db.add(booking)
    _commit_booking(db, booking)

    logger.info("Saved booking id=%s for event id=%s", booking.id, booking.event_id)
    return booking


def update_booking(db: Session, booking_id: Any, changes: dict) -> Booking:
    booking = get_booking(db, booking_id)
    if booking is None:
        raise BookingNotFoundError()

    for field in changes:
        if field not in BOOKING_FIELDS:
            raise ValidationError(field, f"Unknown booking field '{field}'")

    current = booking.to_dict()
    changed_fields = {field for field, value in changes.items() if current[field] != value}
    values = BookingValidator(_event_lookup(db)).validate(
        {**current, **changes}, changed_fields=changed_fields
    )

    for field, value in values.items():
        setattr(booking, field, value)
    booking.updated_at = utcnow()
    _commit_booking(db, booking)

    logger.info("Updated booking id=%s fields=%s", booking.id, sorted(changed_fields))
    return booking


def get_booking(db: Session, booking_id: Any) -> Optional[Booking]:
    try:
        key = int(booking_id)
    except (TypeError, ValueError):
        return None
    with storage_errors("look up booking", db):
        return db.get(Booking, key)


def list_bookings(
    db: Session, *, event_id: Optional[int] = None, email: Optional[str] = None
) -> list[Booking]:
    """Return bookings filtered by event and/or email, oldest first."""
    stmt = select(Booking)
    if event_id is not None:
        stmt = stmt.where(Booking.event_id == event_id)
    if email:
        stmt = stmt.where(Booking.email == normalize_email(email))
    with storage_errors("list bookings", db):
        return list(db.scalars(stmt.order_by(Booking.created_at, Booking.id)))


def delete_booking(db: Session, booking_id: Any) -> bool:
    booking = get_booking(db, booking_id)
    if booking is None:
        return False

    with storage_errors("delete booking", db):
        db.delete(booking)
        db.commit()

    logger.info("Deleted booking id=%s", booking_id)
    return True
