"""
Booking writer.

The slot list a client picked from is a stale snapshot, so a new booking is
re-checked at commit time: the slot must still lie inside the barber's
working intervals for that date and must not overlap a current booking
(same overlap predicate the slot generator uses). Checks and insert run
under a Redis lock per barber+date, which serializes concurrent attempts.
Reactivating a cancelled / no-show booking goes through the same lock and
overlap check.
"""

import logging
from contextlib import contextmanager
from datetime import date

from redis import Redis
from redis.exceptions import LockError
from sqlalchemy.orm import Session

from ..config import settings
from ..errors import (
    BookingLockError,
    BookingValidationError,
    NotFoundError,
    SlotConflictError,
)
from ..models.generated import Bookings, Clients
from ..redis_client import redis_client
from ..schemas.bookings import BookingCreate, BookingUpdate
from .availability import repository as repo
from .availability.availability import CLOSED_MESSAGES
from .availability.clock import Clock
from .availability.config import DAY_MINUTES, minutes_to_time_str, time_str_to_minutes
from .availability.generator import intervals_overlap
from .availability.resolver import resolve_working_intervals
from .availability.rules import NON_BLOCKING_STATUSES
from .events import emit_event

logger = logging.getLogger(__name__)

LOCK_PREFIX = "booking_lock"


def _lock_key(barber_id: int, target_date: date) -> str:
    return f"{LOCK_PREFIX}:{barber_id}:{target_date.isoformat()}"


def create_booking(
    db: Session,
    redis: Redis,
    data: BookingCreate,
    clock: Clock,
) -> Bookings:
    """
    Create a pending booking if the slot is still bookable and free.

    Raises:
        NotFoundError: service or barber does not exist
        BookingValidationError: slot outside working hours, closed day, past
        SlotConflictError: slot overlaps a booking committed meanwhile
        BookingLockError: another booking for the barber+date is in progress
    """
    service = repo.get_service(db, data.service_id)
    if service is None:
        raise NotFoundError("Service", data.service_id)

    barber = repo.get_barber(db, data.barber_id)
    if barber is None:
        raise NotFoundError("Barber", data.barber_id)

    start = time_str_to_minutes(data.time)
    end = start + service.duration_minutes
    if end > DAY_MINUTES:
        raise BookingValidationError("The service does not fit before the end of the day.")

    with _booking_lock(redis, barber.id, data.date):
        try:
            _ensure_bookable(db, barber, data.date, start, end, clock)
            _ensure_free(db, barber.id, data.date, start, end)

            client = _upsert_client(db, data)
            booking = Bookings(
                client_id=client.id,
                barber_id=barber.id,
                service_id=service.id,
                date=data.date.isoformat(),
                start_time=minutes_to_time_str(start),
                end_time=minutes_to_time_str(end),
                client_name=data.client_name,
                client_email=data.client_email,
                client_phone=data.client_phone,
                service_name=service.name,
                service_price=service.price,
                status="pending",
                notes=data.notes,
            )
            db.add(booking)
            db.commit()
            db.refresh(booking)
        except Exception:
            db.rollback()
            raise

    logger.info(
        "Booking %s created: barber=%s date=%s %s-%s",
        booking.id, booking.barber_id, booking.date, booking.start_time, booking.end_time,
    )
    emit_event("booking_created", {"booking_id": booking.id}, redis=redis)
    return booking


def get_booking(db: Session, booking_id: int) -> Bookings:
    booking = db.get(Bookings, booking_id)
    if booking is None:
        raise NotFoundError("Booking", booking_id)
    return booking


def update_booking(
    db: Session,
    booking_id: int,
    data: BookingUpdate,
    clock: Clock,
    redis: Redis | None = None,
) -> Bookings:
    """
    Apply a status and/or notes change; status changes are stamped.

    Raises:
        NotFoundError: booking does not exist
        SlotConflictError: reactivated booking overlaps an active one
    """
    booking = get_booking(db, booking_id)
    redis = redis or redis_client

    old_status = booking.status
    status_changed = data.status is not None and data.status != old_status
    reactivated = (
        status_changed
        and old_status in NON_BLOCKING_STATUSES
        and data.status not in NON_BLOCKING_STATUSES
    )

    if reactivated:
        target_date = date.fromisoformat(booking.date)
        with _booking_lock(redis, booking.barber_id, target_date):
            try:
                _ensure_free(
                    db,
                    booking.barber_id,
                    target_date,
                    time_str_to_minutes(booking.start_time),
                    time_str_to_minutes(booking.end_time),
                )
                _apply_update(db, booking, data, clock, status_changed)
            except Exception:
                db.rollback()
                raise
    else:
        _apply_update(db, booking, data, clock, status_changed)

    db.refresh(booking)

    if status_changed and data.status == "cancelled":
        emit_event("booking_cancelled", {"booking_id": booking.id}, redis=redis)
    return booking


def cancel_booking(
    db: Session,
    booking_id: int,
    clock: Clock,
    redis: Redis | None = None,
) -> Bookings:
    """Cancel instead of deleting; history is kept."""
    return update_booking(db, booking_id, BookingUpdate(status="cancelled"), clock, redis)


# ── Helpers ──────────────────────────────────────────────────────────────


@contextmanager
def _booking_lock(redis: Redis, barber_id: int, target_date: date):
    lock = redis.lock(
        _lock_key(barber_id, target_date),
        timeout=settings.lock_timeout_seconds,
        blocking_timeout=settings.lock_blocking_timeout_seconds,
    )
    if not lock.acquire():
        raise BookingLockError()
    try:
        yield
    finally:
        _release(lock)


def _ensure_bookable(
    db: Session,
    barber,
    target_date: date,
    start: int,
    end: int,
    clock: Clock,
) -> None:
    """[start, end) must fit one working interval of an open, non-past day."""
    today = clock.today()
    if target_date < today:
        raise BookingValidationError("Cannot book a date in the past.")

    business = repo.load_business_hours(repo.get_business_settings(db))
    day = resolve_working_intervals(
        repo.barber_schedule(barber),
        business,
        repo.get_day_overrides(db, barber.id, target_date),
        target_date,
        clock.tz,
    )
    if day.is_closed:
        raise BookingValidationError(CLOSED_MESSAGES[day.reason])

    if not any(shift.start <= start and end <= shift.end for shift in day.intervals):
        raise BookingValidationError("The requested time is outside working hours.")

    if target_date == today:
        now = clock.now()
        if start < now.hour * 60 + now.minute + settings.booking_lead_minutes:
            raise BookingValidationError("This time is too soon to book today.")


def _ensure_free(db: Session, barber_id: int, target_date: date, start: int, end: int) -> None:
    for busy in repo.get_busy_intervals(db, barber_id, target_date):
        if intervals_overlap(start, end, busy.start, busy.end):
            logger.info(
                "Booking conflict: barber=%s date=%s %s-%s",
                barber_id, target_date, minutes_to_time_str(start), minutes_to_time_str(end),
            )
            raise SlotConflictError()


def _apply_update(
    db: Session,
    booking: Bookings,
    data: BookingUpdate,
    clock: Clock,
    status_changed: bool,
) -> None:
    now = clock.now().isoformat(timespec="seconds")

    if status_changed:
        booking.status = data.status
        if data.status == "cancelled":
            booking.cancelled_at = now
        elif data.status == "completed":
            booking.completed_at = now
            _record_visit(db, booking)

    if data.notes is not None:
        booking.notes = data.notes

    booking.updated_at = now
    db.commit()


def _upsert_client(db: Session, data: BookingCreate) -> Clients:
    """Find client by phone or e-mail and refresh contact data, or create one."""
    client = (
        db.query(Clients)
        .filter((Clients.phone == data.client_phone) | (Clients.email == data.client_email))
        .first()
    )
    if client is None:
        client = Clients(
            name=data.client_name,
            email=data.client_email,
            phone=data.client_phone,
        )
        db.add(client)
    else:
        client.name = data.client_name
        client.email = data.client_email
        client.phone = data.client_phone
    db.flush()
    return client


def _record_visit(db: Session, booking: Bookings) -> None:
    if booking.client_id is None:
        return
    client = db.get(Clients, booking.client_id)
    if client is None:
        return
    client.total_visits = (client.total_visits or 0) + 1
    client.last_visit = booking.date


def _release(lock) -> None:
    try:
        lock.release()
    except LockError:
        # Lock expired before release; the commit already happened or failed
        logger.warning("Booking lock %s expired before release", getattr(lock, "name", "?"))
