"""
Namespaced key/value cache on Redis.

Values are JSON. Following the cache convention shared with other
workflow clients, `set(key, None)` deletes the entry.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class SessionCache:
    """
    Async Redis cache scoped to one namespace.

    Features:
    - JSON serialization
    - Default TTL per namespace
    - `set(key, None)` as delete
    """

    def __init__(
        self,
        client: redis.Redis,
        namespace: str,
        default_ttl: Optional[int] = None,
    ):
        self.client = client
        self.namespace = namespace
        self.default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: str, namespace: str, default_ttl: Optional[int] = None) -> "SessionCache":
        return cls(redis.from_url(url, decode_responses=True), namespace, default_ttl)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        """Get the cached value, or None when absent or expired."""
        data = await self.client.get(self._key(key))
        if data is None:
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value; None deletes the entry."""
        if value is None:
            await self.client.delete(self._key(key))
            return
        ttl = ttl or self.default_ttl
        payload = json.dumps(value)
        if ttl:
            await self.client.setex(self._key(key), ttl, payload)
        else:
            await self.client.set(self._key(key), payload)

    async def close(self) -> None:
        try:
            await self.client.aclose()
        except RedisError as e:
            logger.error(f"Error closing session cache connection: {e}")
