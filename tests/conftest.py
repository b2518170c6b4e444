"""
pytest Fixtures for Books API Tests

Shared fixtures used across all test files.

HOW THE TEST APP IS BUILT:
==========================
- create_app() receives explicit Settings, so each test decides which
  integrations (signing secret, Google OAuth) are configured
- The MongoDB dependency is overridden with an in-memory mongomock-motor
  database; unique indexes are created on it exactly as at startup
- Every test gets a fresh database, so tests don't affect each other
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app.
# The rate limiter reads RATE_LIMIT_ENABLED at import time.
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-unit-tests-at-least-32-characters"

import asyncio
import uuid
from collections.abc import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from bookapi.config import Settings
from bookapi.database import ensure_indexes, get_database
from bookapi.main import create_app

TEST_JWT_SECRET = os.environ["JWT_SECRET"]

GOOGLE_SETTINGS = {
    "google_client_id": "test-google-client-id",
    "google_client_secret": "test-google-client-secret",
    "google_callback_url": "http://testserver/api/auth/google/callback",
}


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env file and environment."""
    values = {
        "mongodb_uri": None,
        "jwt_secret": TEST_JWT_SECRET,
        "session_secret": "test-session-secret",
        "environment": "development",
        "rate_limit_enabled": False,
        "google_client_id": None,
        "google_client_secret": None,
        "google_callback_url": None,
        "oauth_failure_redirect": "/login",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def mongo_db():
    """
    A fresh in-memory database with the production indexes.

    Scope: function, so every test starts empty.
    """
    client = AsyncMongoMockClient()
    database = client[f"books_api_test_{uuid.uuid4().hex}"]
    # A private loop leaves pytest-asyncio's current loop untouched
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(ensure_indexes(database))
    finally:
        loop.close()
    return database


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================
@pytest.fixture
def app_factory(mongo_db) -> Callable[..., FastAPI]:
    """
    Build an app wired to the test database.

    Keyword arguments override individual settings, e.g.
    app_factory(jwt_secret=None) or app_factory(**GOOGLE_SETTINGS).
    """

    def factory(**overrides) -> FastAPI:
        app = create_app(make_settings(**overrides))
        app.dependency_overrides[get_database] = lambda: mongo_db
        return app

    return factory


@pytest.fixture
def app(app_factory) -> FastAPI:
    return app_factory()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client for the default app (signing secret set, no Google OAuth)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def google_client(app_factory) -> Generator[TestClient, None, None]:
    """Test client for an app with Google OAuth configured."""
    with TestClient(app_factory(**GOOGLE_SETTINGS)) as test_client:
        yield test_client


# =============================================================================
# AUTH FIXTURES
# =============================================================================
@pytest.fixture
def registered_user(client: TestClient) -> dict:
    """Register a local account and return the response body."""
    response = client.post(
        "/api/auth/register",
        json={"email": "reader@example.com", "password": "secret1", "name": "Reader"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered_user: dict) -> dict:
    return {"Authorization": f"Bearer {registered_user['token']}"}


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
AUTHOR_PAYLOAD = {
    "firstName": "George",
    "lastName": "Orwell",
    "email": "george.orwell@example.com",
    "birthDate": "1903-06-25",
    "nationality": "British",
    "biography": "English novelist, essayist, journalist and critic.",
    "awards": ["Prometheus Hall of Fame Award"],
}


def book_payload(author_id: str, **overrides) -> dict:
    payload = {
        "title": "1984",
        "isbn": "9780451524935",
        "author": author_id,
        "genre": "Science Fiction",
        "publicationYear": 1949,
        "pages": 328,
        "price": 12.99,
        "description": "A dystopian novel about totalitarian surveillance.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def sample_author(client: TestClient, auth_headers: dict) -> dict:
    """Create a sample author through the API."""
    response = client.post("/api/authors", json=AUTHOR_PAYLOAD, headers=auth_headers)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def sample_book(client: TestClient, sample_author: dict) -> dict:
    """Create a sample book written by sample_author."""
    response = client.post("/api/books", json=book_payload(sample_author["id"]))
    assert response.status_code == 201
    return response.json()
