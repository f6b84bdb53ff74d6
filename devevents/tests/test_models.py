"""
Test database models (Event and Booking).
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevents.models.bookings import Booking
from devevents.models.events import Event


def _event(**overrides) -> Event:
    now = datetime.now(timezone.utc)
    fields = dict(
        title="Test Event",
        slug="test-event",
        description="Description",
        overview="Overview",
        image="https://example.com/event.jpg",
        venue="Center",
        location="Amsterdam",
        date="2025-11-14",
        time="09:00",
        mode="In-person",
        audience="Developers",
        agenda=["Registration", "Keynote", "Workshop", "Lunch", "Networking"],
        organizer="Organizer",
        tags=["react", "javascript", "typescript", "web-development", "frontend"],
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return Event(**fields)


class TestEventModel:
    """Test the Event model."""

    def test_list_fields_round_trip(self, db_session: Session):
        event = _event()
        db_session.add(event)
        db_session.commit()
        db_session.expire_all()

        event = db_session.get(Event, event.id)
        assert event.agenda == ["Registration", "Keynote", "Workshop", "Lunch", "Networking"]
        assert event.tags == ["react", "javascript", "typescript", "web-development", "frontend"]

    def test_slug_unique_constraint(self, db_session: Session):
        db_session.add(_event())
        db_session.commit()

        db_session.add(_event(title="Test  Event"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_to_dict(self):
        data = _event().to_dict()

        assert data["title"] == "Test Event"
        assert "slug" not in data
        assert "created_at" not in data


class TestBookingModel:
    """Test the Booking model."""

    def test_booking_without_event_row(self, db_session: Session):
        """The database does not enforce the event reference."""
        now = datetime.now(timezone.utc)
        booking = Booking(event_id=424242, email="a@b.com", created_at=now, updated_at=now)
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)

        assert booking.id is not None
        assert booking.event is None

    def test_booking_relationship_with_event(self, db_session: Session):
        event = _event(title="Conference", slug="conference")
        db_session.add(event)
        db_session.commit()

        now = datetime.now(timezone.utc)
        booking = Booking(event_id=event.id, email="a@b.com", created_at=now, updated_at=now)
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)

        assert booking.event.title == "Conference"
        assert booking.to_dict() == {"event_id": event.id, "email": "a@b.com"}
