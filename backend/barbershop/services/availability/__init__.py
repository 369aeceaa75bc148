# backend/barbershop/services/availability/__init__.py
"""
Availability engine.

resolver  - working intervals of a barber on a date (defaults, weekly
            profile, day overrides)
generator - free start times inside those intervals
search    - earliest free slots across barbers and days
"""

from .config import BookingConfig, minutes_to_time_str, time_str_to_minutes
from .clock import Clock, FixedClock, get_clock
from .generator import generate_slots, intervals_overlap
from .resolver import DayAvailability, resolve_working_intervals, weekday_number
from .availability import calculate_barber_availability, compute_day_slots
from .search import SearchPage, find_next_appointments, search_next_appointments

__all__ = [
    "BookingConfig",
    "minutes_to_time_str",
    "time_str_to_minutes",
    "Clock",
    "FixedClock",
    "get_clock",
    "generate_slots",
    "intervals_overlap",
    "DayAvailability",
    "resolve_working_intervals",
    "weekday_number",
    "calculate_barber_availability",
    "compute_day_slots",
    "SearchPage",
    "find_next_appointments",
    "search_next_appointments",
]
