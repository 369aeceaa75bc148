# backend/barbershop/routers/bookings.py
# DELETE = soft cancel (status), bookings are never removed

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import BookingValidationError, NotFoundError, SlotConflictError
from ..redis_client import get_redis
from ..schemas.bookings import (
    BookingCreate,
    BookingRead,
    BookingUpdate,
)
from ..services import booking_writer
from ..services.availability import Clock, get_clock

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, db: Session = Depends(get_db)):
    try:
        return booking_writer.get_booking(db, id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis = Depends(get_redis),
):
    try:
        return booking_writer.create_booking(db, redis, data, clock)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SlotConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.patch("/{id}", response_model=BookingRead)
def update_booking(
    id: int,
    data: BookingUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis = Depends(get_redis),
):
    try:
        return booking_writer.update_booking(db, id, data, clock, redis)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
    except SlotConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/{id}", response_model=BookingRead)
def cancel_booking(
    id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis = Depends(get_redis),
):
    try:
        return booking_writer.cancel_booking(db, id, clock, redis)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
