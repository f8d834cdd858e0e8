"""Pytest fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.services.cache import clear_all_caches
from api.services.database import DatabaseService, get_db


@pytest.fixture
def client(test_db):
    """TestClient whose requests read the seeded in-memory database."""
    service = DatabaseService(connection=test_db)
    app.dependency_overrides[get_db] = lambda: service
    clear_all_caches()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    clear_all_caches()


@pytest.fixture
def short_timeout(monkeypatch):
    """Shrink the per-request analytics timeout."""
    from api.config import get_settings

    monkeypatch.setattr(get_settings(), "request_timeout_seconds", 0.05)
