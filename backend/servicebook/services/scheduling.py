# backend/servicebook/services/scheduling.py
"""
Scheduling conflict detection.

A booking occupies [start, start + duration) in minutes since midnight of
its booking_date. Two bookings conflict iff their intervals intersect:

    new_start < existing_end and existing_start < new_end

so [10:00, 11:00) and [11:00, 12:00) do not conflict.

Known limitation: end is start + duration in raw minutes and may run past
1440. Bookings on the following day are not examined.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, Optional

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Booking
from .errors import BadRequestError, ConflictError, ServiceUnavailableError
from .repositories import BookingRepository

logger = logging.getLogger(__name__)


def time_str_to_minutes(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and start_b < end_a


def find_conflict(
    booking_time: str,
    duration: int,
    existing: Iterable[Booking],
) -> Optional[Booking]:
    """Return the first existing booking overlapping the candidate, if any."""
    new_start = time_str_to_minutes(booking_time)
    new_end = new_start + duration

    for booking in existing:
        existing_start = time_str_to_minutes(booking.booking_time)
        existing_end = existing_start + (booking.duration or 0)
        if intervals_overlap(new_start, new_end, existing_start, existing_end):
            return booking

    return None


def check_scheduling_conflicts(
    db: Session,
    booking_date: date,
    booking_time: str,
    duration: int,
) -> None:
    """Raise BadRequestError if the slot overlaps an active booking that day."""
    same_day = BookingRepository.get_active_on_day(db, booking_date)
    clash = find_conflict(booking_time, duration, same_day)
    if clash is not None:
        logger.info(
            f"Slot conflict: {booking_date} {booking_time}+{duration}min "
            f"overlaps booking_id={clash.id}"
        )
        raise BadRequestError("Time slot conflicts with existing booking")


# ── Day lock ─────────────────────────────────────────────────────────────

def day_lock_key(booking_date: date) -> str:
    return f"lock:bookings:day:{booking_date.isoformat()}"


@contextmanager
def day_lock(redis: Optional[Redis], booking_date: date) -> Iterator[None]:
    """
    Serialize conflict check + insert for one calendar day.

    No-op when locking is disabled or no Redis client is given.
    If Redis cannot be reached the call fails with ServiceUnavailableError,
    or runs unlocked when settings.booking_lock_fail_open is set.
    """
    if redis is None or not settings.booking_lock_enabled:
        yield
        return

    lock = redis.lock(
        day_lock_key(booking_date),
        timeout=settings.booking_lock_timeout_seconds,
        blocking_timeout=settings.booking_lock_wait_seconds,
    )
    try:
        acquired = lock.acquire()
    except RedisError as e:
        if not settings.booking_lock_fail_open:
            logger.error(f"Day lock for {booking_date} unavailable: {e}")
            raise ServiceUnavailableError("Booking service temporarily unavailable, retry") from e
        logger.warning(f"Day lock for {booking_date} unavailable, continuing unlocked: {e}")
        lock = None
        acquired = True

    if lock is None:
        yield
        return

    if not acquired:
        logger.warning(f"Could not acquire day lock for {booking_date}")
        raise ConflictError("Booking slot is busy, retry")

    try:
        yield
    finally:
        try:
            lock.release()
        except RedisError as e:
            # expired while the request was still running, or Redis went away
            logger.warning(f"Day lock for {booking_date} not released: {e}")
