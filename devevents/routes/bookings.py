from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from devevents.database.db import get_db
from devevents.schemas.bookings import BookingOut, BookingUpdate, BookRequest
from devevents.services.bookings import (
    delete_booking,
    list_bookings,
    update_booking,
    validate_and_save_booking,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingOut)
def book_event(payload: BookRequest, db: Session = Depends(get_db)):
    return validate_and_save_booking(db, payload.model_dump())


@router.get("", response_model=list[BookingOut])
def find_bookings(
    event_id: Optional[int] = None,
    email: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return list_bookings(db, event_id=event_id, email=email)


@router.patch("/{booking_id}", response_model=BookingOut)
def edit_booking(booking_id: int, payload: BookingUpdate, db: Session = Depends(get_db)):
    return update_booking(db, booking_id, payload.model_dump(exclude_unset=True))


@router.delete("/{booking_id}", status_code=204)
def cancel_booking(booking_id: int, db: Session = Depends(get_db)):
    if not delete_booking(db, booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")
