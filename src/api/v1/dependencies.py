"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.group_cache import IGroupCache, NullGroupCache
from domain.services.group_service import GroupService
from infrastructure.cache.redis_group_cache import RedisGroupCache
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_group_cache() -> IGroupCache:
    """Redis invalidation when configured, otherwise a no-op."""
    if settings.redis_url:
        return RedisGroupCache.from_url(settings.redis_url, settings.group_cache_prefix)
    return NullGroupCache()


@lru_cache
def get_group_service() -> GroupService:
    """Get Group service instance."""
    return GroupService(get_uow_factory(), cache=get_group_cache())
