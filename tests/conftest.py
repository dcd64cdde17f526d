"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Test database (SQLite in-memory for speed)
- Test client (FastAPI TestClient)
- Fake Google OAuth endpoints and a fake n8n webhook (httpx.MockTransport)
- Session helpers
- Sample data factories
"""

import json
import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator

import httpx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.config import settings
from app.core.security import create_session_token
from app.db.base import Base
from app.db.session import get_db
from app.deps import get_google_auth_client, get_webhook_proxy
from app.environments.google import GoogleAuthClient
from app.models import GoogleDriveConnection, Project, ProjectUsage, User
from app.services.webhook_proxy import WebhookProxy


APP_URL = "https://copy.example.com"
WEBHOOK_URL = "https://n8n.example.com/webhook/website-copy"


# ---------------------------------------------------------------------------
# TEST DATABASE SETUP
# ---------------------------------------------------------------------------
# Use SQLite in-memory for fast tests (no PostgreSQL dependency)
# StaticPool keeps the same connection across all operations

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},  # Required for SQLite
    poolclass=StaticPool,  # Keep connection alive across operations
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ---------------------------------------------------------------------------
# SETTINGS
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Pin the settings the routes read, whatever the local .env says."""
    monkeypatch.setattr(settings, "APP_URL", APP_URL)
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "test-client-id")
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setattr(settings, "N8N_WEBHOOK_URL", WEBHOOK_URL)
    monkeypatch.setattr(settings, "SESSION_COOKIE_SECURE", False)
    return settings


# ---------------------------------------------------------------------------
# FAKE UPSTREAMS
# ---------------------------------------------------------------------------

class FakeGoogle:
    """
    Stands in for Google's token and userinfo endpoints.

    Tests change the status/body attributes before calling the callback.
    """

    def __init__(self):
        self.token_status = 200
        self.token_body = {
            "access_token": "ya29.fresh-access",
            "refresh_token": "1//fresh-refresh",
            "expires_in": 3599,
            "token_type": "Bearer",
            "scope": "https://www.googleapis.com/auth/drive openid",
        }
        self.userinfo_status = 200
        self.userinfo_body = {
            "id": "google-123",
            "email": "owner@example.com",
            "verified_email": True,
            "name": "Sam Owner",
        }
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/token":
            return httpx.Response(self.token_status, json=self.token_body)
        if request.url.path == "/oauth2/v2/userinfo":
            return httpx.Response(self.userinfo_status, json=self.userinfo_body)
        return httpx.Response(404, json={"error": "not_found"})

    def client(self) -> GoogleAuthClient:
        return GoogleAuthClient(
            client_id="test-client-id",
            client_secret="test-client-secret",
            redirect_uri=f"{APP_URL}/api/auth/google-drive/callback",
            transport=httpx.MockTransport(self.handler),
        )


class FakeWebhook:
    """Stands in for the n8n webhook; records every JSON payload it receives."""

    def __init__(self):
        self.status = 200
        self.body = {"message": "Workflow was started"}
        self.text = None
        self.error = None
        self.payloads = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        self.payloads.append(json.loads(request.content))
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.body)

    def proxy(self) -> WebhookProxy:
        return WebhookProxy(url=WEBHOOK_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture
def webhook() -> FakeWebhook:
    return FakeWebhook()


# ---------------------------------------------------------------------------
# DATABASE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Create a fresh database for each test function.

    - Creates all tables
    - Yields a session for the test
    - Drops all tables after test (clean slate)
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(
    db: Session,
    google: FakeGoogle,
    webhook: FakeWebhook,
) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and fake upstreams.

    Overrides get_db, get_google_auth_client and get_webhook_proxy.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_google_auth_client] = google.client
    app.dependency_overrides[get_webhook_proxy] = webhook.proxy

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# USER / SESSION FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def test_user(db: Session) -> User:
    """User "owner@example.com", matching FakeGoogle's profile email."""
    user = User(
        email="owner@example.com",
        name="Sam Owner",
        google_user_id="google-123",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Authorization header carrying a session token for test_user."""
    token, _ = create_session_token(test_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def drive_connection(db: Session, test_user: User) -> GoogleDriveConnection:
    """Active connection for test_user whose token expires in an hour."""
    connection = GoogleDriveConnection(
        user_id=test_user.id,
        google_email=test_user.email,
        access_token="ya29.stored-access",
        refresh_token="1//stored-refresh",
        token_expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scope="https://www.googleapis.com/auth/drive",
        is_active=True,
    )
    db.add(connection)
    db.commit()
    db.refresh(connection)
    return connection


@pytest.fixture
def test_project(db: Session, test_user: User) -> Project:
    project = Project(
        user_id=test_user.id,
        project_name="Acme Bakery",
        business_details="Family bakery in Leeds",
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def pending_usage(db: Session, test_user: User, test_project: Project) -> ProjectUsage:
    usage = ProjectUsage(
        user_id=test_user.id,
        project_id=test_project.id,
        request_type="website_generation",
        request_data={
            "request_type": "website_generation",
            "project_name": "Acme Bakery",
            "business_details": "Family bakery in Leeds",
            "website_structure": "Home, About, Menu",
        },
        website_structure="Home, About, Menu",
        status="pending",
    )
    db.add(usage)
    db.commit()
    db.refresh(usage)
    return usage
