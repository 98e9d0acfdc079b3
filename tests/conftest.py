"""
Shared fixtures: temporary SQLite database, fixed clock, isolated signal bus.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from database.models import Base
from processor.hotness import DecisionFeaturingService, HotnessTracker
from repositories import TerritoryRepository
from signals import SignalBus


START = datetime(2025, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SignalRecorder:
    """Subscribes to a signal and keeps every payload received."""

    def __init__(self):
        self.calls = []

    def __call__(self, **payload):
        self.calls.append(payload)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def factory():
        session = maker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    yield factory
    await engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bus() -> SignalBus:
    return SignalBus()


@pytest.fixture
def tracker(session_factory, bus, clock) -> HotnessTracker:
    return HotnessTracker(session_factory=session_factory, bus=bus, clock=clock, default_trigger=10)


@pytest.fixture
def featuring(tracker) -> DecisionFeaturingService:
    service = DecisionFeaturingService(tracker, timezone="UTC")
    service.register()
    return service


@pytest.fixture
def add_territory(session_factory):
    """Create a territory row; returns its ID."""

    async def _add(territory_id: str, name: str = None) -> str:
        async with session_factory() as session:
            await TerritoryRepository(session).create_territory(territory_id, name or territory_id.title())
        return territory_id

    return _add


@pytest.fixture
def get_votable(session_factory):
    """Load the votable record of a territory in a fresh session."""

    async def _get(territory_id: str):
        async with session_factory() as session:
            return await TerritoryRepository(session).get_votable(territory_id)

    return _get
