"""API test fixtures — httpx client against the app with the service overridden."""

import pytest
from httpx import ASGITransport, AsyncClient

from session_tracker.api.dependencies import get_entry_service
from session_tracker.infrastructure.local_store import (
    LocalSessionStore, MemoryKeyValueStorage,
)
from session_tracker.main import app
from session_tracker.services.session_service import (
    LocalSessionService, RemoteSessionService,
)


@pytest.fixture
async def client(sql_store):
    """Client wired to the remote service over the in-memory database."""
    app.dependency_overrides[get_entry_service] = lambda: RemoteSessionService(sql_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def local_client():
    """Client wired to the local service over an in-memory key-value store."""
    service = LocalSessionService(LocalSessionStore(MemoryKeyValueStorage()))
    app.dependency_overrides[get_entry_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
