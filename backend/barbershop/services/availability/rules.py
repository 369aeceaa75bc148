# backend/barbershop/services/availability/rules.py
"""
Value types for the working-hours layers.

Three layers feed the resolver:
  1. BusinessHours  - shop-wide opening hours (optional split)
  2. BarberSchedule - per-barber weekly profile, replaces layer 1 per shift
  3. DayOverride    - per-date closure or replacement hours,
                      barber-specific or shop-wide (barber_id=None)

All times are minutes since midnight.
"""

from dataclasses import dataclass, field
from datetime import date

from .config import minutes_to_time_str

# Statuses that free the booked interval
NON_BLOCKING_STATUSES = frozenset({"cancelled", "no_show"})

DEFAULT_WORKING_DAYS = frozenset({1, 2, 3, 4, 5, 6})  # Monday..Saturday, 0 = Sunday


@dataclass(frozen=True)
class Shift:
    """Working interval [start, end)."""
    start: int
    end: int

    def is_valid(self) -> bool:
        return self.start < self.end

    def as_time_strings(self) -> tuple[str, str]:
        return minutes_to_time_str(self.start), minutes_to_time_str(self.end)

    def __str__(self) -> str:
        start, end = self.as_time_strings()
        return f"{start}-{end}"


@dataclass(frozen=True)
class BusyInterval:
    """Interval occupied by an existing booking."""
    start: int
    end: int


@dataclass(frozen=True)
class BusinessHours:
    primary: Shift
    secondary: Shift | None = None


@dataclass(frozen=True)
class BarberSchedule:
    """
    Weekly profile of one barber.

    primary/secondary are None when the barber has no own hours for that
    shift; the business defaults are used instead.
    """
    barber_id: int
    is_active: bool = True
    working_days: frozenset[int] = field(default=DEFAULT_WORKING_DAYS)
    primary: Shift | None = None
    secondary: Shift | None = None
    name: str = ""
    color: str = "#3b82f6"


@dataclass(frozen=True)
class DayOverride:
    date: date
    barber_id: int | None = None  # None = whole shop
    is_closed: bool = False
    start: int | None = None
    end: int | None = None


# Evaluated top to bottom; the first matching override governs the day.
# (scope, is_closed)
OVERRIDE_PRECEDENCE = (
    ("barber", True),
    ("barber", False),
    ("shop", True),
    ("shop", False),
)


def select_override(
    overrides: list[DayOverride],
    barber_id: int,
    target_date: date,
) -> DayOverride | None:
    """Pick the override that governs barber_id on target_date, if any."""
    for scope, closed in OVERRIDE_PRECEDENCE:
        for override in overrides:
            if override.date != target_date or override.is_closed != closed:
                continue
            if scope == "barber" and override.barber_id == barber_id:
                return override
            if scope == "shop" and override.barber_id is None:
                return override
    return None
