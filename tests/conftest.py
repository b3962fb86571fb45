"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from haven.canvas import CanvasStore, InMemoryPersistence


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["GEMINI_API_KEY"] = "test-gemini-key"
    os.environ["TAVILY_API_KEY"] = "test-tavily-key"
    os.environ["LOG_LEVEL"] = "WARNING"


@pytest.fixture
def persistence():
    return InMemoryPersistence()


@pytest.fixture
def store(persistence):
    return CanvasStore(persistence)


@pytest.fixture
def mock_generate():
    """Patch the Gemini text call every capability goes through."""
    with patch("haven.services.gemini_service.generate_text") as mock:
        yield mock


@pytest.fixture
def db_session():
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.get = AsyncMock()
    return session


@pytest.fixture
def client(store, db_session):
    """TestClient with the canvas store and DB session swapped for test doubles."""
    from haven.db import get_db
    from haven.main import app
    from haven.routes.canvas import get_store

    async def _db():
        yield db_session

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_db] = _db
    yield TestClient(app)
    app.dependency_overrides.clear()
