# backend/barbershop/services/availability/config.py
"""
Booking configuration for availability calculation.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from ...config import settings
from ...errors import ConfigurationError

DAY_MINUTES = 24 * 60


def time_str_to_minutes(value: str) -> int:
    """
    Convert "HH:MM" (seconds, if present, are ignored) to minutes since midnight.

    "24:00" is accepted as end of day.
    """
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if hour < 0 or not 0 <= minute < 60:
        raise ValueError(f"Invalid time string: {value!r}")

    total = hour * 60 + minute
    if total > DAY_MINUTES:
        raise ValueError(f"Time out of day range: {value!r}")
    return total


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to zero-padded "HH:MM"."""
    if not 0 <= minutes <= DAY_MINUTES:
        raise ValueError(f"Minutes out of day range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the availability engine.

    Attributes:
        slot_step_minutes: Granularity between candidate start times
        horizon_days: How many days ahead the next-appointment search scans
        lead_minutes: Minimum buffer between now and the first slot of today
        page_size: Items per next-appointment page
    """
    slot_step_minutes: int = 30
    horizon_days: int = 30
    lead_minutes: int = 30
    page_size: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes <= 0 or DAY_MINUTES % self.slot_step_minutes:
            raise ConfigurationError(
                f"slot_step_minutes must divide a day, got {self.slot_step_minutes}"
            )
        if self.horizon_days < 1:
            raise ConfigurationError(f"horizon_days must be positive, got {self.horizon_days}")
        if self.lead_minutes < 0:
            raise ConfigurationError(f"lead_minutes cannot be negative, got {self.lead_minutes}")
        if self.page_size < 1:
            raise ConfigurationError(f"page_size must be positive, got {self.page_size}")

    @classmethod
    def from_settings(cls, values: Mapping[str, str | None]) -> "BookingConfig":
        """
        Build the configuration from the business `settings` table.

        The horizon is clamped to the application-wide maximum.
        """
        step = _int_setting(values, "slot_interval_minutes", 30)
        horizon = _int_setting(values, "max_advance_days", 30)
        horizon = max(1, min(horizon, settings.max_horizon_days))

        return cls(
            slot_step_minutes=step,
            horizon_days=horizon,
            lead_minutes=settings.booking_lead_minutes,
            page_size=settings.next_appointment_page_size,
        )


def _int_setting(values: Mapping[str, str | None], key: str, default: int) -> int:
    raw = values.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"Setting {key!r} must be an integer, got {raw!r}") from None
