# backend/barbershop/services/availability/resolver.py
"""
Availability resolver.

Turns the three working-hours layers into the concrete working intervals
of one barber on one date:

  inactive barber      -> closed
  weekday not worked   -> closed
  primary shift        = barber primary   or business primary
  secondary shift      = barber secondary or business secondary or none
  override (closed)    -> closed
  override (hours)     -> replaces primary start and/or end only
  malformed shift      -> skipped (logged)
  secondary not after
  primary end          -> dropped (logged)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from pytz.tzinfo import BaseTzInfo

from .rules import BarberSchedule, BusinessHours, DayOverride, Shift, select_override

logger = logging.getLogger(__name__)

REASON_INACTIVE = "inactive"
REASON_DAY_OFF = "day_off"
REASON_CLOSED = "closed"


@dataclass(frozen=True)
class DayAvailability:
    """Resolved working intervals (ascending, disjoint) for a barber+date."""
    intervals: tuple[Shift, ...] = ()
    is_closed: bool = False
    reason: str | None = None

    @property
    def is_split(self) -> bool:
        return len(self.intervals) > 1


def weekday_number(target_date: date, tz: BaseTzInfo) -> int:
    """
    Weekday of target_date in the business timezone, 0 = Sunday .. 6 = Saturday.

    The date is anchored at noon so no timezone shift can move it to a
    neighbouring day.
    """
    noon = tz.localize(datetime.combine(target_date, time(12, 0)))
    return noon.isoweekday() % 7


def resolve_working_intervals(
    schedule: BarberSchedule,
    business: BusinessHours,
    overrides: list[DayOverride],
    target_date: date,
    tz: BaseTzInfo,
) -> DayAvailability:
    """Resolve the working intervals of schedule.barber_id on target_date."""
    if not schedule.is_active:
        return DayAvailability(is_closed=True, reason=REASON_INACTIVE)

    if weekday_number(target_date, tz) not in schedule.working_days:
        return DayAvailability(is_closed=True, reason=REASON_DAY_OFF)

    primary = schedule.primary or business.primary
    secondary = schedule.secondary or business.secondary

    override = select_override(overrides, schedule.barber_id, target_date)
    if override is not None:
        if override.is_closed:
            return DayAvailability(is_closed=True, reason=REASON_CLOSED)
        primary = Shift(
            start=override.start if override.start is not None else primary.start,
            end=override.end if override.end is not None else primary.end,
        )

    intervals: list[Shift] = []

    if primary.is_valid():
        intervals.append(primary)
    else:
        logger.warning(
            "Skipping malformed primary shift %s for barber %s on %s",
            primary, schedule.barber_id, target_date,
        )

    if secondary is not None:
        if not secondary.is_valid():
            logger.warning(
                "Skipping malformed second shift %s for barber %s on %s",
                secondary, schedule.barber_id, target_date,
            )
        elif intervals and secondary.start <= intervals[0].end:
            logger.warning(
                "Dropping second shift %s for barber %s on %s: must start after %s",
                secondary, schedule.barber_id, target_date, intervals[0],
            )
        else:
            intervals.append(secondary)

    return DayAvailability(intervals=tuple(intervals))
