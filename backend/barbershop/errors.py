"""
Typed failures raised by the availability and booking services.

Routers translate them into HTTP errors; an empty slot list is never an
error.
"""


class BookingError(Exception):
    """Base class for domain errors."""


class NotFoundError(BookingError):
    """Referenced barber, service or booking does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConfigurationError(BookingError):
    """Business configuration cannot be used to compute availability."""


class SlotConflictError(BookingError):
    """The requested slot overlaps an existing booking."""

    default_message = "This slot was just taken, please choose another."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class BookingLockError(SlotConflictError):
    """Another booking for the same barber and date is being written."""

    default_message = "Another booking is being made for this barber, please try again."


class BookingValidationError(BookingError):
    """The requested slot is not one the schedule offers (closed, past, outside hours)."""
