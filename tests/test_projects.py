"""
Tests for the generation flow, project/history API and HTML pages.

These tests verify:
- POST /api/projects/generate creates a pending request and relays it to n8n
- Submissions without a Drive connection or with blank fields are refused
- Webhook failures leave the request pending
- GET /api/projects and GET /api/history
- /dashboard and /history render status badges, links and escaped content
- End to end: form → pending → callback ready → history shows the output link
"""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.deps import get_webhook_proxy
from app.main import app
from app.models import Project, ProjectUsage
from app.services.webhook_proxy import WebhookProxy


APP_URL = "https://copy.example.com"

FORM = {
    "projectName": "  Acme Bakery ",
    "businessDetails": "Family bakery in Leeds",
    "websiteStructure": "Home, About, Menu",
}


class TestGenerate:
    """Tests for POST /api/projects/generate."""

    def test_generate_creates_pending_request_and_relays_job(
        self, client: TestClient, db: Session, auth_headers: dict, drive_connection, webhook
    ):
        response = client.post("/api/projects/generate", json=FORM, headers=auth_headers)

        assert response.status_code == 202
        data = response.json()
        assert data["status"] == "pending"

        usage = db.scalars(select(ProjectUsage)).one()
        project = db.scalars(select(Project)).one()
        assert data["id"] == str(usage.id)
        assert data["projectId"] == str(project.id)
        assert project.project_name == "Acme Bakery"
        assert usage.status == "pending"

        assert len(webhook.payloads) == 1
        payload = webhook.payloads[0]
        assert payload["id"] == str(usage.id)
        assert payload["projectName"] == "Acme Bakery"
        assert payload["businessDetails"] == "Family bakery in Leeds"
        assert payload["websiteStructure"] == "Home, About, Menu"
        assert payload["callbackUrl"] == f"{APP_URL}/api/callback"
        assert payload["googleDriveCredentials"]["access_token"] == "ya29.stored-access"
        assert payload["googleDriveCredentials"]["refresh_token"] == "1//stored-refresh"
        assert payload["googleDriveCredentials"]["google_email"] == "owner@example.com"

        db.refresh(drive_connection)
        assert drive_connection.last_used is not None

    def test_second_submission_reuses_project(
        self, client: TestClient, db: Session, auth_headers: dict, drive_connection
    ):
        client.post("/api/projects/generate", json=FORM, headers=auth_headers)
        client.post("/api/projects/generate", json=FORM, headers=auth_headers)

        assert db.scalar(select(func.count()).select_from(Project)) == 1
        assert db.scalar(select(func.count()).select_from(ProjectUsage)) == 2

    def test_requires_session(self, client: TestClient):
        response = client.post("/api/projects/generate", json=FORM)

        assert response.status_code == 401

    def test_requires_drive_connection(
        self, client: TestClient, db: Session, auth_headers: dict, webhook
    ):
        response = client.post("/api/projects/generate", json=FORM, headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "Please connect your Google Drive to create projects."
        assert db.scalar(select(func.count()).select_from(Project)) == 0
        assert webhook.payloads == []

    def test_blank_field_is_rejected(
        self, client: TestClient, db: Session, auth_headers: dict, drive_connection
    ):
        response = client.post(
            "/api/projects/generate",
            json={**FORM, "websiteStructure": "   "},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert db.scalar(select(func.count()).select_from(ProjectUsage)) == 0

    def test_webhook_failure_leaves_request_pending(
        self, client: TestClient, db: Session, auth_headers: dict, drive_connection, webhook
    ):
        webhook.status = 500
        webhook.text = "workflow crashed"

        response = client.post("/api/projects/generate", json=FORM, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"] == "n8n webhook failed: workflow crashed"
        usage = db.scalars(select(ProjectUsage)).one()
        assert usage.status == "pending"

    def test_unconfigured_webhook_writes_nothing(
        self, client: TestClient, db: Session, auth_headers: dict, drive_connection
    ):
        app.dependency_overrides[get_webhook_proxy] = lambda: WebhookProxy(url="")

        response = client.post("/api/projects/generate", json=FORM, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"] == "N8N_WEBHOOK_URL is not configured"
        assert db.scalar(select(func.count()).select_from(Project)) == 0
        assert db.scalar(select(func.count()).select_from(ProjectUsage)) == 0


class TestProjectAndHistoryApi:

    def test_list_projects(self, client: TestClient, auth_headers: dict, test_project: Project):
        response = client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["project_name"] == "Acme Bakery"
        assert data[0]["status"] == "active"

    def test_list_projects_requires_session(self, client: TestClient):
        assert client.get("/api/projects").status_code == 401

    def test_history(self, client: TestClient, auth_headers: dict, pending_usage):
        response = client.get("/api/history", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == str(pending_usage.id)
        assert data[0]["project_name"] == "Acme Bakery"
        assert data[0]["status"] == "pending"
        assert data[0]["output_link"] is None

    def test_history_search(self, client: TestClient, auth_headers: dict, pending_usage):
        assert len(client.get("/api/history?q=bakery", headers=auth_headers).json()) == 1
        assert client.get("/api/history?q=florist", headers=auth_headers).json() == []


class TestPages:

    def test_root_redirects_to_dashboard(self, client: TestClient):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/dashboard"

    def test_dashboard_without_session_offers_connect(self, client: TestClient):
        response = client.get("/dashboard")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'href="/api/auth/google-drive"' in response.text

    def test_dashboard_flash_messages(self, client: TestClient):
        connected = client.get("/dashboard?google_drive_connected=true")
        denied = client.get("/dashboard?error=auth_denied")

        assert "Google Drive connected successfully." in connected.text
        assert '<div class="flash flash-error">' in denied.text
        assert "Google Drive access was denied." in denied.text

    def test_dashboard_connected(
        self, client: TestClient, auth_headers: dict, drive_connection, test_project
    ):
        response = client.get("/dashboard", headers=auth_headers)

        assert "Google Drive connected" in response.text
        assert "owner@example.com" in response.text
        assert '<option value="Acme Bakery">' in response.text

    def test_history_without_session(self, client: TestClient):
        response = client.get("/history")

        assert response.status_code == 200
        assert "Connect your Google Drive to see your project history." in response.text

    def test_history_badges_and_output_column(
        self, client: TestClient, db: Session, auth_headers: dict, test_user, test_project
    ):
        now = datetime.now(timezone.utc)
        rows = [
            ("ready", "https://drive.example/doc", None, 3),
            ("pending", None, None, 2),
            ("error", None, "Drive quota exceeded", 1),
            ("archived", None, None, 0),
        ]
        for status, link, error, minutes in rows:
            db.add(ProjectUsage(
                user_id=test_user.id,
                project_id=test_project.id,
                request_type="website_generation",
                website_structure="Home",
                status=status,
                output_link=link,
                error_message=error,
                created_at=now - timedelta(minutes=minutes),
            ))
        db.commit()

        html = client.get("/history", headers=auth_headers).text

        assert '<span class="badge badge-green">ready</span>' in html
        assert '<span class="badge badge-yellow">pending</span>' in html
        assert '<span class="badge badge-red">error</span>' in html
        assert '<span class="badge badge-gray">archived</span>' in html
        assert 'href="https://drive.example/doc"' in html
        assert "View Output" in html
        assert 'title="Drive quota exceeded">Error</span>' in html
        assert '<span class="muted">-</span>' in html

    def test_history_escapes_user_content(
        self, client: TestClient, db: Session, auth_headers: dict, test_user
    ):
        project = Project(
            user_id=test_user.id,
            project_name="<script>alert(1)</script>",
            business_details="Fish & Chips",
        )
        db.add(project)
        db.commit()
        db.add(ProjectUsage(
            user_id=test_user.id,
            project_id=project.id,
            request_type="website_generation",
            website_structure="Home",
            status="pending",
        ))
        db.commit()

        html = client.get("/history", headers=auth_headers).text

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "Fish &amp; Chips" in html

    def test_history_only_links_web_urls(
        self, client: TestClient, db: Session, auth_headers: dict, test_project
    ):
        db.add(ProjectUsage(
            user_id=test_project.user_id,
            project_id=test_project.id,
            request_type="website_generation",
            website_structure="Home",
            status="ready",
            output_link="JavaScript:alert(document.cookie)",
        ))
        db.commit()

        html = client.get("/history", headers=auth_headers).text

        assert 'href="javascript:' not in html.lower()
        assert "View Output" not in html
        assert '<span class="muted">-</span>' in html

    def test_history_empty_search(self, client: TestClient, auth_headers: dict, pending_usage):
        html = client.get("/history?q=florist", headers=auth_headers).text

        assert "No requests found." in html
        assert 'value="florist"' in html


class TestEndToEnd:

    def test_form_to_history_with_output_link(
        self, client: TestClient, auth_headers: dict, drive_connection, webhook
    ):
        """Submit → pending → callback ready → history shows a green badge and the link."""
        submitted = client.post("/api/projects/generate", json=FORM, headers=auth_headers)
        assert submitted.status_code == 202
        usage_id = submitted.json()["id"]

        history = client.get("/api/history", headers=auth_headers).json()
        assert history[0]["status"] == "pending"

        callback = client.post(
            "/api/callback",
            json={
                "id": webhook.payloads[0]["id"],
                "status": "ready",
                "outputLink": "https://drive.example/doc",
            },
        )
        assert callback.status_code == 200

        history = client.get("/api/history", headers=auth_headers).json()
        assert history[0]["id"] == usage_id
        assert history[0]["status"] == "ready"
        assert history[0]["output_link"] == "https://drive.example/doc"

        html = client.get("/history", headers=auth_headers).text
        assert '<span class="badge badge-green">ready</span>' in html
        assert '<a href="https://drive.example/doc" target="_blank" rel="noopener noreferrer">View Output</a>' in html
