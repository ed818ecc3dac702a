import json
from typing import Any, Optional

from pydantic_core import to_jsonable_python

from tracker.core.logger import logger


class CacheManager:
    """
    JSON values in Redis under `<prefix>:<part>:<part>...` keys.

    Redis errors propagate; callers decide whether a cache miss is fatal.
    """

    def __init__(self, prefix: str = "", client=None):
        self.prefix = prefix.rstrip(":")
        if client is None:
            from tracker.core.redis_client import redis_client
            client = redis_client
        self.client = client

    def key(self, *parts: Any) -> str:
        """index:^GSPC:1y"""
        return ":".join([self.prefix, *(str(p) for p in parts if p is not None)])

    def get(self, *parts) -> Optional[Any]:
        key = self.key(*parts)
        raw = self.client.get(key)
        if not raw:
            logger.debug(f"Cache miss: {key}")
            return None
        logger.debug(f"Cache hit: {key}")
        return json.loads(raw)

    def set(self, data: Any, *parts, ttl: Optional[int] = None):
        key = self.key(*parts)
        self.client.set(key, json.dumps(data, default=to_jsonable_python), ex=ttl)
        logger.debug(f"Cache set: {key} (TTL={ttl}s)")

    def delete(self, *parts):
        self.client.delete(self.key(*parts))
