# backend/barbershop/services/availability/search.py
"""
Next-appointment search.

Scans day by day from today over a bounded horizon, every eligible barber
per day, and returns a page of the earliest free slots ordered by
(date, time). The scan stops at the first day boundary where
skip + page_size + 1 candidates are collected; the extra one tells
whether another page exists.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError
from . import repository as repo
from .availability import compute_day_slots
from .clock import Clock
from .config import BookingConfig
from .rules import BarberSchedule

logger = logging.getLogger(__name__)

DaySlotsLoader = Callable[[BarberSchedule, date], list[int]]


@dataclass(frozen=True)
class AppointmentCandidate:
    date: date
    start: int
    barber_id: int
    barber_name: str
    barber_color: str


@dataclass(frozen=True)
class SearchPage:
    items: list[AppointmentCandidate]
    total: int
    has_more: bool


def search_next_appointments(
    barbers: list[BarberSchedule],
    day_slots: DaySlotsLoader,
    today: date,
    horizon_days: int,
    skip: int = 0,
    page_size: int = 5,
) -> SearchPage:
    """
    Collect free slots across barbers and days and cut one page.

    Args:
        barbers: Eligible barbers in a stable order
        day_slots: Returns sorted start minutes for (barber, date)
        today: First day to scan
        horizon_days: Number of days to scan at most
        skip: Items to skip (pagination)
        page_size: Items per page

    A failing (barber, date) lookup is logged and skipped.
    """
    if skip < 0:
        raise ValueError(f"skip cannot be negative, got {skip}")
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")

    needed = skip + page_size + 1
    found: list[AppointmentCandidate] = []

    for offset in range(horizon_days):
        if len(found) >= needed:
            break

        day = today + timedelta(days=offset)
        for barber in barbers:
            try:
                starts = day_slots(barber, day)
            except Exception:
                logger.exception(
                    "Skipping barber %s on %s in next-appointment search",
                    barber.barber_id, day,
                )
                continue

            found.extend(
                AppointmentCandidate(
                    date=day,
                    start=start,
                    barber_id=barber.barber_id,
                    barber_name=barber.name,
                    barber_color=barber.color,
                )
                for start in starts
            )

    # Stable: barbers keep their order for equal (date, start)
    found.sort(key=lambda c: (c.date, c.start))

    return SearchPage(
        items=found[skip:skip + page_size],
        total=len(found),
        has_more=len(found) > skip + page_size,
    )


def find_next_appointments(
    db: Session,
    duration_minutes: int,
    clock: Clock,
    barber_id: int | None = None,
    skip: int = 0,
    page_size: int | None = None,
    config: BookingConfig | None = None,
) -> SearchPage:
    """
    Next free appointments for any active barber (or one barber).

    Raises:
        NotFoundError: barber_id given but no such barber exists
    """
    if barber_id is not None and repo.get_barber(db, barber_id) is None:
        raise NotFoundError("Barber", barber_id)

    values = repo.get_business_settings(db)
    config = config or BookingConfig.from_settings(values)
    business = repo.load_business_hours(values)

    barbers = [repo.barber_schedule(b) for b in repo.get_active_barbers(db, barber_id)]
    if not barbers:
        return SearchPage(items=[], total=0, has_more=False)

    def day_slots(schedule: BarberSchedule, day: date) -> list[int]:
        try:
            _, slots = compute_day_slots(
                db, schedule, business, day, duration_minutes, config, clock
            )
        except SQLAlchemyError:
            # Failed statement leaves the transaction unusable for later lookups
            db.rollback()
            raise
        return slots

    return search_next_appointments(
        barbers,
        day_slots,
        today=clock.today(),
        horizon_days=config.horizon_days,
        skip=skip,
        page_size=page_size or config.page_size,
    )
