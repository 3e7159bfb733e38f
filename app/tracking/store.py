"""
Storage wiring for the order tracker.

One async engine per process. Each webhook request gets its own session,
wrapped in a SqlOrderTracker, through the `get_tracker` dependency.
"""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings
from app.models.order_event import Base
from app.tracking.tracker import OrderTracker, SqlOrderTracker

engine = create_async_engine(settings.database_url, echo=False)
tracker_sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_order_events_table() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=[Base.metadata.tables["order_events"]])


async def close_store() -> None:
    await engine.dispose()


async def get_tracker() -> AsyncIterator[OrderTracker]:
    """Order tracker bound to a session that lives for one request."""
    async with tracker_sessions() as session:
        yield SqlOrderTracker(session)
