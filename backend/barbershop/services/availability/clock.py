# backend/barbershop/services/availability/clock.py
"""
Clock abstraction.

Availability depends on "now" (lead time, today's date, search start), so
the current moment is injected instead of read inside the engine.
"""

from datetime import date, datetime

import pytz

from ...config import settings


class Clock:
    """Current moment in the business timezone."""

    def __init__(self, timezone: str):
        self.tz = pytz.timezone(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock frozen at a given moment (naive moments are taken as business-local)."""

    def __init__(self, moment: datetime, timezone: str):
        super().__init__(timezone)
        if moment.tzinfo is None:
            moment = self.tz.localize(moment)
        else:
            moment = moment.astimezone(self.tz)
        self._moment = moment

    def now(self) -> datetime:
        return self._moment


def get_clock() -> Clock:
    """FastAPI dependency."""
    return Clock(settings.timezone)
