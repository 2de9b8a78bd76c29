"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from uuid import UUID, uuid4

# Disable rate limiting and external cache in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_URL"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.group_service import GroupService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, GroupMemberModel, GroupModel
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

GroupSeeder = Callable[..., Awaitable[UUID]]
MemberSeeder = Callable[..., Awaitable[None]]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def seed_group(session_factory: async_sessionmaker[AsyncSession]) -> GroupSeeder:
    """Insert a group row directly and return its id."""

    async def _seed(
        *,
        owner_id: UUID | None = None,
        is_public: bool = True,
        is_active: bool = True,
        member_count: int = 0,
        max_members: int = 10,
        name: str = "Trail Runners",
    ) -> UUID:
        group_id = uuid4()
        async with session_factory() as session:
            session.add(
                GroupModel(
                    id=group_id,
                    name=name,
                    owner_id=owner_id or uuid4(),
                    is_public=is_public,
                    is_active=is_active,
                    member_count=member_count,
                    max_members=max_members,
                )
            )
            await session.commit()
        return group_id

    return _seed


@pytest.fixture
def seed_member(session_factory: async_sessionmaker[AsyncSession]) -> MemberSeeder:
    """Insert a membership row directly (bypasses the counter)."""

    async def _seed(
        group_id: UUID,
        user_id: UUID,
        status: str = "ACTIVE",
        role: str = "MEMBER",
    ) -> None:
        async with session_factory() as session:
            session.add(
                GroupMemberModel(group_id=group_id, user_id=user_id, status=status, role=role)
            )
            await session.commit()

    return _seed


@pytest.fixture
def read_group(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[UUID], Awaitable[GroupModel | None]]:
    """Fetch a group row as currently committed."""

    async def _read(group_id: UUID) -> GroupModel | None:
        async with session_factory() as session:
            result = await session.execute(select(GroupModel).where(GroupModel.id == group_id))
            return result.scalar_one_or_none()

    return _read


@pytest.fixture
def read_members(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[UUID], Awaitable[list[GroupMemberModel]]]:
    """Fetch all membership rows of a group as currently committed."""

    async def _read(group_id: UUID) -> list[GroupMemberModel]:
        async with session_factory() as session:
            result = await session.execute(
                select(GroupMemberModel).where(GroupMemberModel.group_id == group_id)
            )
            return list(result.scalars())

    return _read


@pytest.fixture
def test_user() -> TokenUser:
    """The default authenticated caller."""
    return TokenUser(
        id=uuid4(),
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def make_headers(auth_provider: JWTAuthProvider) -> Callable[[TokenUser], dict[str, str]]:
    """Build Authorization headers for any user."""

    def _make(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return _make


@pytest.fixture
def auth_headers(
    make_headers: Callable[[TokenUser], dict[str, str]], test_user: TokenUser
) -> dict[str, str]:
    """Authorization headers for the default test user."""
    return make_headers(test_user)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client wired to the in-memory database.

    Tokens are validated for real by the test auth provider, so requests
    without an Authorization header behave as anonymous callers.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_group_service
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_group_service] = lambda: GroupService(uow_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
