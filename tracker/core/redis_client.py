import redis
from tracker.core.config import settings
from tracker.core.logger import logger

# callers fall back to the market data provider on RedisError
redis_client = redis.Redis.from_url(
    settings.REDIS_URL,
    decode_responses=True,
    socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
    socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
)


def check_redis_connection() -> bool:
    """Startup probe; the API keeps serving without Redis, only uncached."""
    try:
        redis_client.ping()
    except redis.RedisError as e:
        logger.warning(f"Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT} unreachable, benchmark cache disabled: {e}")
        return False
    logger.info(f"Connected to Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    return True
