"""Pytest configuration and fixtures."""

from datetime import date

import pytest
from httpx import AsyncClient, ASGITransport

from timeloop.config import get_settings
from timeloop.database import Database
from timeloop.main import create_app
from timeloop.services.tracking_service import (
    CategoryService,
    EntryService,
    TimeRecordService,
)


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point settings at a throwaway data directory."""
    monkeypatch.setenv("TIMELOOP_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TIMELOOP_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'timeloop.db'}")
    monkeypatch.setenv("TIMELOOP_RATE_LIMIT_ENABLED", "false")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
async def test_database():
    """Create an open in-memory store with all tables."""
    database = Database("sqlite+aiosqlite:///:memory:")
    await database.open()
    await database.create_all()
    yield database
    await database.close()


@pytest.fixture
async def test_session(test_database):
    """Create a test database session."""
    async with test_database.session() as session:
        yield session


@pytest.fixture
async def client(test_database):
    """Create a test client backed by the in-memory store."""
    app = create_app(database=test_database)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def sample_data(test_session):
    """A small tracked history.

    Writing (Work) has 60 min on 2024-03-04 and 30 min on 2024-03-10.
    Reading (Leisure) has 45 min on 2024-02-20.
    Cooking has no category and no time.
    """
    categories = CategoryService(test_session)
    entries = EntryService(test_session)
    records = TimeRecordService(test_session)

    work = await categories.create("Work", color="#3b82f6")
    leisure = await categories.create("Leisure", color="#22c55e")

    writing = await entries.create("Writing", work.id)
    reading = await entries.create("Reading", leisure.id)
    cooking = await entries.create("Cooking", None)

    await records.create(writing.id, 60, date(2024, 3, 4), "draft")
    await records.create(writing.id, 30, date(2024, 3, 10), None)
    await records.create(reading.id, 45, date(2024, 2, 20), None)
    await test_session.commit()

    return {
        "work": work,
        "leisure": leisure,
        "writing": writing,
        "reading": reading,
        "cooking": cooking,
    }
