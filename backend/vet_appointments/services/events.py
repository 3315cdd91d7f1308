"""
backend/vet_appointments/services/events.py

Event emitter: pushes appointment lifecycle events to a Redis queue
for consumption by notification workers.

Queue:
- events:p2p — instant delivery (client / veterinarian notifications)

Best effort: a Redis failure is logged and never fails the request.
"""

import json
import time
import logging

from ..config import settings
from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a p2p event (instant delivery).

    Pushed to Redis list `events:p2p` for the consumer loop.
    """
    if not settings.events_enabled:
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(P2P_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def appointment_payload(appointment) -> dict:
    """Event payload for an appointment row."""
    return {
        "appointment_id": str(appointment.id),
        "veterinarian_id": str(appointment.veterinarian_id),
        "client_id": str(appointment.client_id),
        "appointment_date": appointment.appointment_date.isoformat(),
        "status": appointment.status,
    }
