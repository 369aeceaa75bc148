# backend/barbershop/routers/availability.py
"""
Availability API endpoints.

GET /availability/day  - free start times of one barber on one date
GET /availability/next - earliest free appointments, paginated
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ConfigurationError, NotFoundError
from ..schemas.availability import (
    AvailabilityResponse,
    NextAppointment,
    NextAppointmentsResponse,
)
from ..services.availability import (
    Clock,
    calculate_barber_availability,
    find_next_appointments,
    get_clock,
    minutes_to_time_str,
)
from ..services.availability import repository as repo

DEFAULT_DURATION = 30

router = APIRouter(prefix="/availability", tags=["availability"])


def _resolve_duration(db: Session, duration: int | None, service_id: int | None) -> int:
    if service_id is not None:
        service = repo.get_service(db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service.duration_minutes
    return duration or DEFAULT_DURATION


@router.get("/day", response_model=AvailabilityResponse)
def get_day_availability(
    barber_id: int,
    target_date: date = Query(..., alias="date"),
    duration: int | None = Query(None, ge=5, le=480),
    service_id: int | None = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Get free time slots for a barber on a specific day."""
    duration_minutes = _resolve_duration(db, duration, service_id)

    try:
        result = calculate_barber_availability(
            db=db,
            barber_id=barber_id,
            target_date=target_date,
            duration_minutes=duration_minutes,
            clock=clock,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return AvailabilityResponse(**result)


@router.get("/next", response_model=NextAppointmentsResponse)
def get_next_appointments(
    duration: int | None = Query(None, ge=5, le=480),
    service_id: int | None = None,
    barber_id: int | None = None,
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Get the earliest free appointments across barbers (or for one barber)."""
    duration_minutes = _resolve_duration(db, duration, service_id)

    try:
        page = find_next_appointments(
            db=db,
            duration_minutes=duration_minutes,
            clock=clock,
            barber_id=barber_id,
            skip=skip,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return NextAppointmentsResponse(
        items=[
            NextAppointment(
                date=item.date,
                time=minutes_to_time_str(item.start),
                barber_id=item.barber_id,
                barber_name=item.barber_name,
                barber_color=item.barber_color,
            )
            for item in page.items
        ],
        total=page.total,
        has_more=page.has_more,
    )
