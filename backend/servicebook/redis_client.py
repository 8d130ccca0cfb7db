# backend/servicebook/redis_client.py

from redis import Redis

from .config import settings

# Connects lazily on first command
redis_client = Redis.from_url(
    settings.redis_url,
    decode_responses=True,
    socket_timeout=settings.redis_socket_timeout,
    socket_connect_timeout=settings.redis_socket_timeout,
)


def get_redis() -> Redis:
    """FastAPI dependency; overridden in tests."""
    return redis_client
