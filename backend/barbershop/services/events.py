"""
backend/barbershop/services/events.py

Event emitter: pushes booking events to a Redis queue for the notification
consumers (e-mail, WhatsApp, calendar), which live outside this service.

Queue:
- events:p2p: instant delivery (booking notifications to specific people)
"""

import json
import time
import logging

from redis import Redis

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict, redis: Redis | None = None) -> bool:
    """
    Emit a p2p event (instant delivery).

    Returns:
        True if the event was queued. Failures are logged, never raised.
    """
    redis = redis or redis_client
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis.rpush(P2P_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
        return True
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
        return False
