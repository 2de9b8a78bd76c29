"""Read-side cache contract for group views."""

from typing import Protocol
from uuid import UUID

import structlog

logger = structlog.get_logger()


class IGroupCache(Protocol):
    """Anything that caches rendered group views."""

    async def invalidate(self, group_id: UUID) -> None:
        """Drop cached views of a group so the next read refreshes."""
        ...


class NullGroupCache:
    """Used when no cache backend is configured."""

    async def invalidate(self, group_id: UUID) -> None:
        logger.debug("group_cache_disabled", group_id=str(group_id))
