"""
Notekeeper Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    ├── mock_db_session: AsyncMock session for NoteService unit tests
    ├── make_note_row: Builds ORM-like rows for the mocked session to return
    ├── db_engine: aiosqlite engine on a per-test database file, schema created
    └── test_client: HTTPX AsyncClient talking to the app, with the session
                     dependency pointed at db_engine
"""

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

# The settings singleton is built at import; configure it before any
# notekeeper import happens.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./notekeeper_test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from notekeeper.database import Base, get_db_session
from notekeeper.models.note import Note  # noqa: F401


# ══════════════════════════════════════════════════════════════════════════
# Unit Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session, make_note_row):
            mock_db_session.execute.return_value.scalar_one.return_value = make_note_row()
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def make_note_row():
    """Factory for objects shaped like a loaded `Note` row."""

    def _make(**overrides):
        now = datetime.now(timezone.utc)
        row = {
            "id": uuid4(),
            "title": "Groceries",
            "content": "milk, eggs",
            "category": "",
            "published": None,
            "created_at": now,
            "updated_at": now,
        }
        row.update(overrides)
        return SimpleNamespace(**row)

    return _make


# ══════════════════════════════════════════════════════════════════════════
# HTTP Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A real database for HTTP tests.

    What:    aiosqlite engine on a fresh file with the `notes` table created
             from the ORM metadata.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    How:   Uses ASGITransport to route requests directly to the app; the
           session dependency is overridden to use db_engine.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from notekeeper.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
