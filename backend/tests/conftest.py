"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Environment defaults set before the app module is imported
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_BACKEND", "remote")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import session_tracker.models  # noqa: E402,F401
from session_tracker.core.domain_types import Identity  # noqa: E402
from session_tracker.db.base import Base  # noqa: E402
from session_tracker.infrastructure.database import DatabaseSessionManager  # noqa: E402
from session_tracker.infrastructure.remote_store import SqlSessionStore  # noqa: E402

OWNER = Identity(id="user-a", email="a@example.com")
OTHER_OWNER = Identity(id="user-b", email="b@example.com")


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def sql_store(db_manager):
    return SqlSessionStore(db_manager)


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def other_owner():
    return OTHER_OWNER
