"""Shared fixtures: an isolated app on an in-memory SQLite database."""

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import create_app

TEST_SECRET = "test-secret-key-for-the-todo-api-suite"
VALID_PASSWORD = "Valid123!"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        database_url="sqlite+aiosqlite://",
        environment="production",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register(client, username: str, password: str = VALID_PASSWORD):
    return client.post("/api/auth/register", json={"username": username, "password": password})


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
