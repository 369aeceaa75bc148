# backend/barbershop/services/availability/repository.py
"""
Read-only data access for the availability engine.

Converts stored rows (times as "HH:MM[:SS]" text, dates as ISO text) into
the value types of rules.py.
"""

import json
import logging
from datetime import date

from sqlalchemy.orm import Session

from ...models.generated import Barbers, Bookings, Services, Settings, SpecialHours
from .config import time_str_to_minutes
from .rules import (
    DEFAULT_WORKING_DAYS,
    NON_BLOCKING_STATUSES,
    BarberSchedule,
    BusinessHours,
    BusyInterval,
    DayOverride,
    Shift,
)

logger = logging.getLogger(__name__)

DEFAULT_OPENING_TIME = "09:00"
DEFAULT_CLOSING_TIME = "19:00"

BUSINESS_SETTING_KEYS = (
    "opening_time",
    "closing_time",
    "opening_time_2",
    "closing_time_2",
    "slot_interval_minutes",
    "max_advance_days",
)


# ── Settings ─────────────────────────────────────────────────────────────


def get_business_settings(db: Session) -> dict[str, str | None]:
    """Get business settings as {key: value}."""
    rows = db.query(Settings).filter(Settings.key.in_(BUSINESS_SETTING_KEYS)).all()
    return {row.key: row.value for row in rows}


def load_business_hours(values: dict[str, str | None]) -> BusinessHours:
    """Build shop-wide opening hours, falling back to 09:00-19:00."""
    primary = _parse_shift(
        values.get("opening_time") or DEFAULT_OPENING_TIME,
        values.get("closing_time") or DEFAULT_CLOSING_TIME,
        "business primary shift",
    )
    if primary is None:
        primary = Shift(
            time_str_to_minutes(DEFAULT_OPENING_TIME),
            time_str_to_minutes(DEFAULT_CLOSING_TIME),
        )

    secondary = _parse_shift(
        values.get("opening_time_2"),
        values.get("closing_time_2"),
        "business second shift",
    )
    return BusinessHours(primary=primary, secondary=secondary)


# ── Barbers ──────────────────────────────────────────────────────────────


def get_barber(db: Session, barber_id: int):
    """Get barber by ID (active or not)."""
    return db.get(Barbers, barber_id)


def get_active_barbers(db: Session, barber_id: int | None = None) -> list:
    """Get active barbers in stable order (name, id), optionally a single one."""
    query = db.query(Barbers).filter(Barbers.is_active == 1)
    if barber_id is not None:
        query = query.filter(Barbers.id == barber_id)
    return query.order_by(Barbers.name, Barbers.id).all()


def barber_schedule(barber) -> BarberSchedule:
    """Convert a barber row into its weekly profile."""
    label = f"barber {barber.id}"
    return BarberSchedule(
        barber_id=barber.id,
        is_active=bool(barber.is_active),
        working_days=_parse_working_days(barber.working_days, label),
        primary=_parse_shift(barber.start_time, barber.end_time, f"{label} primary shift"),
        secondary=_parse_shift(barber.start_time_2, barber.end_time_2, f"{label} second shift"),
        name=barber.name,
        color=barber.color or "#3b82f6",
    )


# ── Services ─────────────────────────────────────────────────────────────


def get_service(db: Session, service_id: int):
    """Get active service by ID."""
    return db.query(Services).filter(
        Services.id == service_id,
        Services.is_active == 1,
    ).first()


# ── Day overrides ────────────────────────────────────────────────────────


def get_day_overrides(db: Session, barber_id: int, target_date: date) -> list[DayOverride]:
    """Get barber-specific and shop-wide overrides for target_date."""
    rows = (
        db.query(SpecialHours)
        .filter(
            SpecialHours.date == target_date.isoformat(),
            (SpecialHours.barber_id == barber_id) | (SpecialHours.barber_id.is_(None)),
        )
        .all()
    )

    overrides = []
    for row in rows:
        overrides.append(DayOverride(
            date=target_date,
            barber_id=row.barber_id,
            is_closed=bool(row.is_closed),
            start=_parse_time(row.start_time, f"override {row.id} start"),
            end=_parse_time(row.end_time, f"override {row.id} end"),
        ))
    return overrides


# ── Bookings ─────────────────────────────────────────────────────────────


def get_busy_intervals(db: Session, barber_id: int, target_date: date) -> list[BusyInterval]:
    """Get intervals occupied by bookings that still hold their time."""
    rows = (
        db.query(Bookings)
        .filter(
            Bookings.barber_id == barber_id,
            Bookings.date == target_date.isoformat(),
            Bookings.status.notin_(NON_BLOCKING_STATUSES),
        )
        .all()
    )

    busy = []
    for row in rows:
        start = _parse_time(row.start_time, f"booking {row.id} start")
        end = _parse_time(row.end_time, f"booking {row.id} end")
        if start is None or end is None:
            continue
        busy.append(BusyInterval(start=start, end=end))
    return busy


# ── Parsing helpers ──────────────────────────────────────────────────────


def _parse_time(value, label: str) -> int | None:
    """Parse a stored time; None for empty, logged None for garbage."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return time_str_to_minutes(str(value)[:5])
    except ValueError:
        logger.warning("Ignoring invalid time %r for %s", value, label)
        return None


def _parse_shift(start, end, label: str) -> Shift | None:
    """A shift exists only when both bounds are set and parseable."""
    start_min = _parse_time(start, label)
    end_min = _parse_time(end, label)
    if start_min is None or end_min is None:
        return None
    return Shift(start=start_min, end=end_min)


def _parse_working_days(raw, label: str) -> frozenset[int]:
    if raw is None or str(raw).strip() == "":
        return DEFAULT_WORKING_DAYS
    try:
        days = json.loads(raw) if isinstance(raw, str) else raw
        return frozenset(int(d) for d in days if 0 <= int(d) <= 6)
    except (TypeError, ValueError):
        logger.warning("Invalid working_days %r for %s, using defaults", raw, label)
        return DEFAULT_WORKING_DAYS
