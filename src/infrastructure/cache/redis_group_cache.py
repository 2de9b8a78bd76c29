"""Redis-backed invalidation of cached group views."""

from uuid import UUID

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()


class RedisGroupCache:
    """Deletes ``{prefix}:{group_id}`` and every ``{prefix}:{group_id}:*`` key."""

    def __init__(self, client: redis.Redis, prefix: str = "group") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "group") -> "RedisGroupCache":
        return cls(redis.Redis.from_url(url, decode_responses=True), prefix)

    def key_for(self, group_id: UUID) -> str:
        return f"{self._prefix}:{group_id}"

    async def invalidate(self, group_id: UUID) -> None:
        base = self.key_for(group_id)
        keys = [base]
        async for key in self._client.scan_iter(match=f"{base}:*"):
            keys.append(key)
        deleted = await self._client.delete(*keys)
        logger.debug("group_cache_invalidated", group_id=str(group_id), deleted=deleted)

    async def close(self) -> None:
        await self._client.aclose()
