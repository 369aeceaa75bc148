# backend/barbershop/services/availability/generator.py
"""
Slot generator.

Pure function over one barber's working intervals for one date. The
overlap predicate defined here is also used by the booking writer when it
re-checks a slot at commit time.
"""

from collections.abc import Iterable

from .rules import BusyInterval, Shift

DEFAULT_LEAD_MINUTES = 30


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """True if [start_a, end_a) and [start_b, end_b) overlap."""
    return start_a < end_b and end_a > start_b


def generate_slots(
    intervals: Iterable[Shift],
    duration_minutes: int,
    step_minutes: int,
    bookings: Iterable[BusyInterval],
    is_today: bool,
    now_minutes: int,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
) -> list[int]:
    """
    Generate bookable start minutes.

    Each interval is walked independently from its start in steps of
    step_minutes; a candidate is kept when it ends inside the interval,
    respects the lead time (today only) and overlaps no booking.

    Returns:
        Sorted list of start minutes.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    busy = list(bookings)
    cutoff = now_minutes + lead_minutes if is_today else None

    slots: list[int] = []
    for interval in intervals:
        for start in range(interval.start, interval.end - duration_minutes + 1, step_minutes):
            if cutoff is not None and start < cutoff:
                continue

            end = start + duration_minutes
            if any(intervals_overlap(start, end, b.start, b.end) for b in busy):
                continue

            slots.append(start)

    slots.sort()
    return slots
