"""Shared test fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.phonepe import get_gateway
from app.main import app
from app.models.order_event import Base
from app.providers.mock_provider import MockPaymentGateway
from app.tracking.store import get_tracker
from app.tracking.tracker import SqlOrderTracker


@pytest_asyncio.fixture
async def db_session():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def gateway():
    return MockPaymentGateway()


@pytest_asyncio.fixture
async def client(gateway: MockPaymentGateway, db_session: AsyncSession):
    """HTTP client wired to the app with the mock gateway and in-memory tracker."""
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_tracker] = lambda: SqlOrderTracker(db_session)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
