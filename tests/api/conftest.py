"""
Fixtures for API tests.

Each test gets a fresh application wired to an in-memory SQLite database
and the in-memory storage client, driven through FastAPI's TestClient.
"""

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from ptmate.config.settings import Settings
from ptmate.main import create_app

API = "/api/v1"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        database_url="sqlite://",
        jwt_secret="api-test-signing-key",
        r2_mock_mode=True,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the context runs the lifespan, which creates the schema
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[..., dict]:
    """Register a trainer and return Authorization headers for it."""

    def _register(email: str = "coach@example.com", password: str = "secret123") -> dict:
        response = client.post(f"{API}/auth/register", json={
            "email": email,
            "password": password,
            "first_name": "Deniz",
            "last_name": "Kaya",
        })
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def headers(register) -> dict:
    return register()


@pytest.fixture
def other_headers(register) -> dict:
    """A second, unrelated trainer."""
    return register(email="rival@example.com")


@pytest.fixture
def make_client(client) -> Callable[..., dict]:
    def _make_client(headers: dict, **fields) -> dict:
        body = {"first_name": "Ada", "last_name": "Yilmaz", **fields}
        response = client.post(f"{API}/clients", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_client


@pytest.fixture
def make_session(client) -> Callable[..., dict]:
    def _make_session(headers: dict, client_id: str, scheduled_at: str, **fields) -> dict:
        body = {"client_id": client_id, "scheduled_at": scheduled_at, **fields}
        response = client.post(f"{API}/sessions", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_session
