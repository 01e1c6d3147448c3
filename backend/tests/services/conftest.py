"""Service test fixtures — async DB, record store, rules engine and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db dependency overridden to use the test session factory
    - fake_clock advances one second per reading so timestamp order is deterministic
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import app.models  # noqa: F401
from app.db.base import Base
from app.infrastructure.database import (
    get_db, DatabaseSessionManager, enable_sqlite_foreign_keys,
)
import app.infrastructure.database as db_module
from app.main import app
from app.services.consistency_rules import ConsistencyRules
from app.services.record_store import RecordStore
from tests.services.factories import team_fields


class FakeClock:
    """Returns UTC instants one second apart, starting at `start`."""

    def __init__(self, start: datetime):
        self.current = start
        self.readings: list[datetime] = []

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        self.readings.append(self.current)
        return self.current


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(test_db, fake_clock):
    return RecordStore(test_db, clock=fake_clock)


@pytest.fixture
def rules(test_db, store):
    return ConsistencyRules(test_db, store=store)


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_team(rules):
    return await rules.create_team(team_fields())
