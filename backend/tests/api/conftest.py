"""Fixtures for HTTP route tests.

Clients are created without entering the app lifespan, so the tick loop
never runs; prices stay at their seeded values.
"""

import pytest
from fastapi.testclient import TestClient

from stockwatch.main import create_app


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def logged_in(client):
    """Client holding a session cookie for alice@stockwatch.dev."""
    response = client.post("/api/login", json={"email": "alice@stockwatch.dev"})
    assert response.status_code == 200
    return client
