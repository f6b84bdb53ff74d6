import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from devevents.core.errors import (
    DuplicateSlugError,
    EventNotFoundError,
    StorageError,
    ValidationError,
)
from devevents.database.db import storage_errors
from devevents.models.bookings import Booking
from devevents.models.events import EVENT_FIELDS, EVENT_TEXT_FIELDS, Event
from devevents.services.normalization import normalize_date, normalize_time, slugify, trim

logger = logging.getLogger(__name__)

MAX_LENGTHS = {
    "title": 100,
    "description": 1000,
    "overview": 500,
}

LIST_FIELDS = ("agenda", "tags")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def validate_event(data: dict, *, changed_fields: Optional[set[str]] = None) -> dict:
    """
    Validate and normalize an event record before it is written.

    ``changed_fields`` lists the fields modified since the record was loaded.
    ``None`` means the record has never been persisted, so every field is
    treated as modified. The slug is derived only when the title is among
    the modified fields; the returned dict has no ``slug`` key otherwise.

    Raises:
        ValidationError: On the first field that fails a constraint.
    """
    first_persist = changed_fields is None
    values: dict[str, Any] = {}

    for field in EVENT_TEXT_FIELDS:
        value = trim(data.get(field))
        if value is None or value == "":
            raise ValidationError(field, f"{_label(field)} is required")
        if not isinstance(value, str):
            raise ValidationError(field, f"{_label(field)} must be a string")
        values[field] = value

    for field, limit in MAX_LENGTHS.items():
        if len(values[field]) > limit:
            raise ValidationError(field, f"{_label(field)} cannot exceed {limit} characters")

    for field in LIST_FIELDS:
        items = data.get(field)
        if not items:
            raise ValidationError(field, f"{_label(field)} must contain at least one item")
        if isinstance(items, str) or not all(isinstance(item, str) for item in items):
            raise ValidationError(field, f"{_label(field)} must be a list of strings")
        values[field] = list(items)

    # Date and time are normalized on every persist, modified or not
    for field, normalize in (("date", normalize_date), ("time", normalize_time)):
        raw = data.get(field)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise ValidationError(field, f"{_label(field)} is required")
        try:
            values[field] = normalize(raw)
        except ValueError as e:
            raise ValidationError(field, str(e)) from e

    if first_persist or "title" in changed_fields:
        values["slug"] = slugify(values["title"])

    return values


def _commit_event(db: Session, event: Event) -> None:
    # Rollback expires the instance, read these first
    title, slug = event.title, event.slug
    try:
        db.commit()
        db.refresh(event)
    except IntegrityError as e:
        db.rollback()
        logger.warning("Rejected event '%s': slug '%s' is already taken", title, slug)
        raise DuplicateSlugError(slug) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to save event '%s'", title)
        raise StorageError(f"Failed to save event: {e}") from e


def validate_and_save_event(db: Session, draft: dict) -> Event:
    """Validate, normalize and insert a new event."""
    values = validate_event(draft)

    now = utcnow()
    event = Event(**values, created_at=now, updated_at=now)
    db.add(event)
    _commit_event(db, event)

    logger.info("Saved event id=%s slug='%s'", event.id, event.slug)
    return event


def update_event(db: Session, event_id: Any, changes: dict) -> Event:
    """
    Apply ``changes`` to an existing event through the same validation path
    as a new one. Nothing is written unless the whole record validates.
    """
    event = find_event_by_id(db, event_id)
    if event is None:
        raise EventNotFoundError("Event not found")

    for field in changes:
        if field not in EVENT_FIELDS:
            raise ValidationError(field, f"Unknown event field '{field}'")

    current = event.to_dict()
    changed_fields = {field for field, value in changes.items() if current[field] != value}
    values = validate_event({**current, **changes}, changed_fields=changed_fields)

    for field, value in values.items():
        setattr(event, field, value)
    event.updated_at = utcnow()
    _commit_event(db, event)

    logger.info("Updated event id=%s fields=%s", event.id, sorted(changed_fields))
    return event


def find_event_by_id(db: Session, event_id: Any) -> Optional[Event]:
    try:
        key = int(event_id)
    except (TypeError, ValueError):
        return None
    with storage_errors("look up event", db):
        return db.get(Event, key)


def get_event_by_slug(db: Session, slug: str) -> Optional[Event]:
    with storage_errors("look up event", db):
        return db.scalar(select(Event).where(Event.slug == slug))


def list_events(db: Session) -> list[Event]:
    """Return all events, newest first."""
    with storage_errors("list events", db):
        return list(db.scalars(select(Event).order_by(Event.created_at.desc(), Event.id.desc())))


def get_event_stats(db: Session, event_id: Any) -> dict:
    event = find_event_by_id(db, event_id)
    if not event:
        return {}

    with storage_errors("count bookings", db):
        bookings = db.scalar(select(func.count(Booking.id)).where(Booking.event_id == event.id))

    return {
        "event_id": event.id,
        "slug": event.slug,
        "bookings": int(bookings or 0),
    }
