from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from devevents.schemas.events import EventSummaryOut


class BookRequest(BaseModel):
    event_id: Optional[int] = None
    email: Optional[str] = None


class BookingUpdate(BaseModel):
    event_id: Optional[int] = None
    email: Optional[str] = None


class BookingOut(BaseModel):
    id: int
    event_id: int
    email: str
    created_at: datetime
    updated_at: datetime
    # None once the referenced event has been deleted
    event: Optional[EventSummaryOut] = None

    class Config:
        from_attributes = True
