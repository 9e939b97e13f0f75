"""Pytest fixtures for the Task Tracker API tests."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from taskapi.config import Settings
from taskapi.identity import IdentityStore
from taskapi.main import create_app
from taskapi.service import TaskService
from taskapi.store import TaskStore


@pytest.fixture
def settings() -> Settings:
    """Settings with a fixed secret and no demo data."""
    return Settings(jwt_secret_key="test-secret", seed_demo_data=False)


@pytest.fixture
def identity(settings: Settings) -> IdentityStore:
    return IdentityStore(settings)


@pytest.fixture
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture
def service(store: TaskStore) -> TaskService:
    return TaskService(store)


@pytest.fixture
def client(settings: Settings, identity: IdentityStore, store: TaskStore) -> TestClient:
    """Create a test client for an isolated app instance."""
    return TestClient(create_app(settings, identity=identity, store=store))


@pytest.fixture
def login(client: TestClient) -> Callable[[str], dict[str, str]]:
    """Return a helper that logs in and builds an Authorization header."""

    def _login(email: str = "john.doe@example.com") -> dict[str, str]:
        response = client.post(
            "/api/v1/auth/login", json={"email": email, "password": "password123"}
        )
        assert response.status_code == 200, response.text
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def auth_headers(login: Callable[[str], dict[str, str]]) -> dict[str, str]:
    return login("john.doe@example.com")


@pytest.fixture
def other_headers(login: Callable[[str], dict[str, str]]) -> dict[str, str]:
    return login("jane.smith@example.com")
