from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError, LockError

from servicebook.services import scheduling
from servicebook.services.errors import ConflictError, ServiceUnavailableError
from servicebook.services.scheduling import (
    day_lock,
    day_lock_key,
    find_conflict,
    intervals_overlap,
    minutes_to_time_str,
    time_str_to_minutes,
)


def existing(booking_time, duration, id=1):
    return SimpleNamespace(id=id, booking_time=booking_time, duration=duration)


def test_time_conversions():
    assert time_str_to_minutes("00:00") == 0
    assert time_str_to_minutes("09:30") == 570
    assert minutes_to_time_str(570) == "09:30"


def test_overlap_is_half_open():
    assert intervals_overlap(600, 660, 630, 690)
    assert not intervals_overlap(600, 660, 660, 720)
    assert not intervals_overlap(660, 720, 600, 660)


def test_partial_overlap_conflicts():
    clash = find_conflict("10:30", 60, [existing("10:00", 60)])
    assert clash is not None and clash.id == 1


def test_adjacent_bookings_do_not_conflict():
    assert find_conflict("11:00", 60, [existing("10:00", 60)]) is None
    assert find_conflict("09:00", 60, [existing("10:00", 60)]) is None


def test_containing_interval_conflicts():
    assert find_conflict("09:00", 240, [existing("10:00", 30, id=7)]).id == 7


def test_late_booking_runs_past_midnight():
    # end is not wrapped; the next day is not examined
    assert find_conflict("23:30", 60, [existing("23:45", 10)]) is not None
    assert find_conflict("00:00", 30, [existing("23:30", 60)]) is None


def test_day_lock_key():
    assert day_lock_key(date(2030, 1, 1)) == "lock:bookings:day:2030-01-01"


def test_day_lock_acquires_and_releases():
    redis = MagicMock()
    with day_lock(redis, date(2030, 1, 1)):
        pass

    redis.lock.assert_called_once()
    assert redis.lock.call_args.args[0] == "lock:bookings:day:2030-01-01"
    redis.lock.return_value.release.assert_called_once()


def test_day_lock_busy_raises_conflict():
    redis = MagicMock()
    redis.lock.return_value.acquire.return_value = False

    with pytest.raises(ConflictError):
        with day_lock(redis, date(2030, 1, 1)):
            pass


def test_day_lock_disabled(monkeypatch):
    monkeypatch.setattr(scheduling.settings, "booking_lock_enabled", False)
    redis = MagicMock()
    with day_lock(redis, date(2030, 1, 1)):
        pass
    redis.lock.assert_not_called()


def test_day_lock_redis_down_is_unavailable():
    redis = MagicMock()
    redis.lock.return_value.acquire.side_effect = RedisConnectionError("down")

    with pytest.raises(ServiceUnavailableError) as exc:
        with day_lock(redis, date(2030, 1, 1)):
            pass
    assert exc.value.status_code == 503


def test_day_lock_redis_down_fail_open(monkeypatch):
    monkeypatch.setattr(scheduling.settings, "booking_lock_fail_open", True)
    redis = MagicMock()
    redis.lock.return_value.acquire.side_effect = RedisConnectionError("down")

    entered = []
    with day_lock(redis, date(2030, 1, 1)):
        entered.append(True)
    assert entered == [True]
    redis.lock.return_value.release.assert_not_called()


def test_day_lock_release_failure_is_logged_not_raised():
    redis = MagicMock()
    redis.lock.return_value.release.side_effect = LockError("expired")

    with day_lock(redis, date(2030, 1, 1)):
        pass
