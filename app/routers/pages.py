"""
Pages Router - the browser-facing HTML pages.

Endpoints:
- GET /          → Redirect to /dashboard
- GET /dashboard → Connection status, callback flash, generation form
- GET /history   → Request history table (?q= to search)

Pages never return 401; without a session they render a
"Connect Google Drive" prompt instead.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import StoreError
from app.db.session import get_db
from app.deps import get_optional_user
from app.models.user import User
from app.pages import PageRenderer, flash_message
from app.services.drive_connection_service import DriveConnectionService
from app.services.project_service import ProjectService


logger = logging.getLogger("tekton.routers.pages")

router = APIRouter(tags=["pages"])

renderer = PageRenderer(app_name=settings.APP_NAME)


@router.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url="/dashboard")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    google_drive_connected: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Render the dashboard.

    The OAuth callback lands here with either google_drive_connected=true
    or error=<code>; the flag becomes a flash message.
    """
    flash = flash_message(google_drive_connected, error)

    if user is None:
        html = renderer.render_dashboard(None, connected=False, flash=flash)
        return HTMLResponse(content=html, status_code=200)

    try:
        connected = DriveConnectionService(db).has_active_connection(user.email)
        projects = ProjectService(db).list_projects(user)
    except StoreError as e:
        logger.error(f"Failed to load dashboard for {user.email}: {e}")
        connected, projects = False, []

    html = renderer.render_dashboard(
        user.email,
        connected=connected,
        projects=projects,
        flash=flash,
    )
    return HTMLResponse(content=html, status_code=200)


@router.get("/history", response_class=HTMLResponse)
def history(
    q: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Render the request history, newest first."""
    if user is None:
        return HTMLResponse(content=renderer.render_not_connected("History"), status_code=200)

    try:
        items = ProjectService(db).list_usage_history(user, search=q)
    except StoreError as e:
        logger.error(f"Failed to load history for {user.email}: {e}")
        return HTMLResponse(
            content=renderer.render_error("History could not be loaded.", title="History"),
            status_code=500,
        )

    return HTMLResponse(content=renderer.render_history(items, search_term=q), status_code=200)
