import json
from unittest.mock import MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from servicebook.services import events


def test_emit_event_uses_given_client():
    redis = MagicMock()
    events.emit_event("booking_cancelled", {"booking_id": 3}, redis=redis)

    queue, raw = redis.rpush.call_args.args
    event = json.loads(raw)
    assert queue == "events:p2p"
    assert event["type"] == "booking_cancelled"
    assert event["booking_id"] == 3
    assert isinstance(event["ts"], int)


def test_emit_event_falls_back_to_shared_client(monkeypatch):
    shared = MagicMock()
    monkeypatch.setattr(events, "redis_client", shared)

    events.emit_event("booking_created", {"booking_id": 1})
    shared.rpush.assert_called_once()


def test_emit_event_swallows_redis_errors():
    redis = MagicMock()
    redis.rpush.side_effect = RedisConnectionError("down")

    events.emit_event("booking_created", {"booking_id": 1}, redis=redis)
