# backend/barbershop/schemas/availability.py
"""
Pydantic schemas for availability API.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class TimeRangeRead(BaseModel):
    start: str  # "HH:MM"
    end: str    # "HH:MM"


class AvailabilityResponse(BaseModel):
    """Free start times of one barber on one day."""
    date: date
    barber_id: int
    slots: list[str] = Field(description="Start times, ascending, 'HH:MM'")
    split_shift: bool = False
    ranges: list[TimeRangeRead] = []
    message: Optional[str] = None


class NextAppointment(BaseModel):
    date: date
    time: str  # "HH:MM"
    barber_id: int
    barber_name: str
    barber_color: str


class NextAppointmentsResponse(BaseModel):
    """One page of the earliest free appointments."""
    items: list[NextAppointment]
    total: int = Field(description="Candidates collected while scanning")
    has_more: bool
