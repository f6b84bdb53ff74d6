from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devevents.database.db import Base

if TYPE_CHECKING:
    from devevents.models.events import Event

BOOKING_FIELDS = ("event_id", "email")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # Bookings for an event by a given address
        Index("ix_bookings_event_id_email", "event_id", "email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Weak reference: existence is checked when the booking is written, not by the database
    event_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    event: Mapped[Optional["Event"]] = relationship(
        "Event",
        primaryjoin="foreign(Booking.event_id) == Event.id",
        viewonly=True,
        lazy="joined",
    )

    def to_dict(self) -> dict:
        return {field: getattr(self, field) for field in BOOKING_FIELDS}
