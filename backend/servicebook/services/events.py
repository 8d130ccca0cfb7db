"""
backend/servicebook/services/events.py

Event emitter: pushes booking lifecycle events to a Redis list for
notification consumers.

Queue:
- events:p2p: booking_created / booking_assigned /
  booking_status_changed / booking_cancelled
"""

import json
import time
import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

EVENTS_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict, redis: Optional[Redis] = None) -> None:
    """
    Emit a p2p event through `redis`, or the shared client when none is given.

    Delivery is best effort: a Redis failure is logged and swallowed so
    the already committed booking change stands.
    """
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        (redis or redis_client).rpush(EVENTS_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {EVENTS_QUEUE}")
    except RedisError as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
