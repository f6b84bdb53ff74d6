from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from devevents.database.db import get_db
from devevents.schemas.events import EventCreate, EventOut, EventStatsOut, EventUpdate
from devevents.services.events import (
    get_event_by_slug,
    get_event_stats,
    list_events,
    update_event,
    validate_and_save_event,
)

router = APIRouter(prefix="/events", tags=["events"])

# DevEventsError subclasses are turned into HTTP responses by the app-level handler


@router.post("", response_model=EventOut)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    return validate_and_save_event(db, payload.model_dump())


@router.get("", response_model=list[EventOut])
def all_events(db: Session = Depends(get_db)):
    return list_events(db)


@router.get("/{slug}", response_model=EventOut)
def event_detail(slug: str, db: Session = Depends(get_db)):
    event = get_event_by_slug(db, slug)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.patch("/{event_id}", response_model=EventOut)
def edit_event(event_id: int, payload: EventUpdate, db: Session = Depends(get_db)):
    return update_event(db, event_id, payload.model_dump(exclude_unset=True))


@router.get("/{event_id}/stats", response_model=EventStatsOut)
def event_stats(event_id: int, db: Session = Depends(get_db)):
    stats = get_event_stats(db, event_id)
    if not stats:
        raise HTTPException(status_code=404, detail="Event not found")
    return stats
