"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked group repository."""

    def __init__(self) -> None:
        self.groups = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type:
            await self.rollback()


class FakeGroupCache:
    """Records invalidated group ids."""

    def __init__(self) -> None:
        self.invalidated: list[UUID] = []

    async def invalidate(self, group_id: UUID) -> None:
        self.invalidated.append(group_id)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def cache() -> FakeGroupCache:
    return FakeGroupCache()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def owner_id() -> UUID:
    """A random group owner ID (distinct from user_id)."""
    return uuid4()
