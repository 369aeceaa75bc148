"""
Booking reminder checker.

Periodically looks for tomorrow's bookings (business timezone) that have
not been reminded yet and emits booking_reminder events; the notification
consumers turn them into e-mail / WhatsApp messages.

Runs as an asyncio task in backend lifespan.
Uses synchronous DB and Redis (via asyncio.to_thread).
"""

import asyncio
import logging
from datetime import timedelta

from redis import Redis
from sqlalchemy.orm import Session

from ..config import settings
from ..database import SessionLocal
from ..models.generated import Bookings
from .availability.clock import Clock, get_clock
from .events import emit_event

logger = logging.getLogger(__name__)

REMINDABLE_STATUSES = ("pending", "confirmed")


async def reminder_checker_loop(interval: int | None = None) -> None:
    """Periodic loop that emits reminders for tomorrow's bookings."""
    interval = interval or settings.reminder_check_interval_seconds
    logger.info("reminder_checker_loop started")

    try:
        while True:
            try:
                await asyncio.to_thread(_run_check)
            except asyncio.CancelledError:
                logger.info("reminder_checker_loop cancelled")
                raise
            except Exception:
                logger.exception("reminder_checker_loop error")

            await asyncio.sleep(interval)
    except asyncio.CancelledError:
        pass


def _run_check() -> None:
    db = SessionLocal()
    try:
        check_upcoming_bookings(db, get_clock())
    finally:
        db.close()


def check_upcoming_bookings(db: Session, clock: Clock, redis: Redis | None = None) -> int:
    """
    Emit booking_reminder for tomorrow's active, not yet reminded bookings.

    Returns:
        Number of reminders emitted.
    """
    tomorrow = clock.today() + timedelta(days=1)

    bookings = (
        db.query(Bookings)
        .filter(
            Bookings.date == tomorrow.isoformat(),
            Bookings.status.in_(REMINDABLE_STATUSES),
            Bookings.reminder_sent == 0,
        )
        .order_by(Bookings.start_time)
        .all()
    )

    sent = 0
    for booking in bookings:
        try:
            if not emit_event("booking_reminder", {"booking_id": booking.id}, redis=redis):
                continue
            booking.reminder_sent = 1
            db.commit()
            sent += 1
        except Exception:
            db.rollback()
            logger.exception(f"Error processing booking {booking.id} for reminder")

    if sent:
        logger.info(f"booking_reminder emitted for {sent} booking(s) on {tomorrow}")
    return sent
