# backend/barbershop/services/availability/availability.py
"""
Barber availability for one day.

resolver (working intervals) -> generator (free start times).
Bookings are only read when the day is open.
"""

from datetime import date

from sqlalchemy.orm import Session

from ...errors import NotFoundError
from . import repository as repo
from .clock import Clock
from .config import BookingConfig, minutes_to_time_str
from .generator import generate_slots
from .resolver import (
    REASON_CLOSED,
    REASON_DAY_OFF,
    REASON_INACTIVE,
    DayAvailability,
    resolve_working_intervals,
)
from .rules import BarberSchedule, BusinessHours

CLOSED_MESSAGES = {
    REASON_INACTIVE: "Barber not available",
    REASON_DAY_OFF: "Barber does not work this day",
    REASON_CLOSED: "Closed this day",
}


def compute_day_slots(
    db: Session,
    schedule: BarberSchedule,
    business: BusinessHours,
    target_date: date,
    duration_minutes: int,
    config: BookingConfig,
    clock: Clock,
) -> tuple[DayAvailability, list[int]]:
    """
    Resolve and generate slots for one barber on one date.

    Returns:
        (resolved day, sorted start minutes)
    """
    overrides = repo.get_day_overrides(db, schedule.barber_id, target_date)
    day = resolve_working_intervals(schedule, business, overrides, target_date, clock.tz)
    if day.is_closed or not day.intervals:
        return day, []

    now = clock.now()
    today = now.date()
    if target_date < today:
        return day, []

    bookings = repo.get_busy_intervals(db, schedule.barber_id, target_date)
    slots = generate_slots(
        day.intervals,
        duration_minutes,
        config.slot_step_minutes,
        bookings,
        is_today=target_date == today,
        now_minutes=now.hour * 60 + now.minute,
        lead_minutes=config.lead_minutes,
    )
    return day, slots


def calculate_barber_availability(
    db: Session,
    barber_id: int,
    target_date: date,
    duration_minutes: int,
    clock: Clock,
    config: BookingConfig | None = None,
) -> dict:
    """
    Calculate free time slots for a barber on a date.

    Returns:
        Dict for AvailabilityResponse.

    Raises:
        NotFoundError: barber does not exist
    """
    barber = repo.get_barber(db, barber_id)
    if barber is None:
        raise NotFoundError("Barber", barber_id)

    values = repo.get_business_settings(db)
    config = config or BookingConfig.from_settings(values)
    business = repo.load_business_hours(values)
    schedule = repo.barber_schedule(barber)

    day, slots = compute_day_slots(
        db, schedule, business, target_date, duration_minutes, config, clock
    )

    return {
        "date": target_date,
        "barber_id": barber_id,
        "slots": [minutes_to_time_str(m) for m in slots],
        "split_shift": day.is_split,
        "ranges": [
            {"start": minutes_to_time_str(s.start), "end": minutes_to_time_str(s.end)}
            for s in day.intervals
        ],
        "message": CLOSED_MESSAGES.get(day.reason),
    }
