"""
Shared pytest fixtures for the Trading Mind test suite.

Provides an in-memory database recreated for every test, a test client,
and registered-user fixtures for integration tests.
"""

import os
import sys

# Test configuration must be in place before the settings modules import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SMS_MOCK_MODE"] = "true"
os.environ["REQUIRE_SMS_VERIFICATION"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from api.main import app
from tradingmind.db.models import Base
from tradingmind.db.session import SessionLocal, engine
from tradingmind.services.sms import get_sms_service

TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_state():
    """Fresh tables and an empty verification code store for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    get_sms_service().store.clear()
    yield
    get_sms_service().store.clear()


@pytest.fixture
def db_session():
    """Database session on the shared in-memory engine."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """FastAPI test client for making HTTP requests."""
    with TestClient(app) as test_client:
        yield test_client


def register(client, username="trader1", phone="13800138000", password=TEST_PASSWORD):
    """Register through the API and return the response envelope."""
    response = client.post(
        "/api/user/register",
        json={"username": username, "phone": phone, "password": password},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def registered_user(client):
    """
    Register a user through the API.

    Returns dict with id, username, phone, password and token.
    """
    body = register(client)
    assert body["code"] == 200, body
    data = body["data"]
    return {
        "id": data["user"]["id"],
        "username": data["user"]["username"],
        "phone": data["user"]["phone"],
        "password": TEST_PASSWORD,
        "token": data["token"],
    }


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['token']}"}
