"""
Google Drive Auth Router - OAuth 2.0 endpoints for connecting Google Drive.

Endpoints:
==========
- GET  /api/auth/google-drive          → Redirect to Google's consent screen
- GET  /api/auth/google-drive/callback → Exchange code, store tokens, redirect to dashboard
- GET  /api/auth/google-drive/status   → Is the session's Google Drive connected?
- POST /api/auth/logout                → Drop the session cookie

OAuth Flow:
===========
1. User clicks "Connect Google Drive" on the dashboard
2. Browser hits GET /api/auth/google-drive
3. Backend redirects to Google's consent screen (offline access, forced consent)
4. Google redirects to /api/auth/google-drive/callback with a code
5. Backend exchanges the code, fetches the profile, upserts the connection
6. Browser lands on /dashboard with a result flag and a session cookie

The callback never raises to the browser. Every outcome is a redirect to
/dashboard with exactly one flag:
    google_drive_connected=true | error=auth_denied | error=no_code
    | error=auth_failed | error=db_save_failed
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import StoreError
from app.core.security import create_session_token
from app.db.session import get_db
from app.deps import app_base_url, get_current_user, get_google_auth_client
from app.environments.google import GoogleAuthClient, DRIVE_CONNECT_SCOPES
from app.models.user import User
from app.schemas.auth import DriveConnectionStatus
from app.services.drive_connection_service import DriveConnectionService
from app.services.user_service import UserService


logger = logging.getLogger("tekton.routers.google_auth")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/api/auth", tags=["google-drive-auth"])


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def dashboard_redirect(request: Request, **flags: str) -> RedirectResponse:
    """Redirect to /dashboard with the given query flags."""
    url = f"{app_base_url(request)}/dashboard"
    if flags:
        url = f"{url}?{urlencode(flags)}"
    return RedirectResponse(url=url)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------


@router.get("/google-drive")
async def start_google_drive_auth(
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """
    Initiate the Google Drive OAuth flow.

    Requests the fixed scope set (userinfo.email, userinfo.profile, drive)
    with offline access and a forced consent prompt so Google returns a
    refresh token on every connect.

    Returns:
        RedirectResponse to Google's consent screen, or a plaintext 500 when
        GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET or APP_URL is missing
    """
    if not auth_client.is_configured:
        logger.error(
            "Missing required environment variables: "
            + ", ".join(auth_client.missing_configuration())
        )
        return PlainTextResponse(
            "Server configuration error: Missing required environment variables",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    try:
        auth_url = auth_client.get_authorization_url(
            scopes=DRIVE_CONNECT_SCOPES,
            state=auth_client.generate_state(),
        )
    except Exception as e:
        logger.exception("Failed to build Google authorization URL")
        return PlainTextResponse(
            f"Authentication failed: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(f"Redirecting to Google OAuth (redirect_uri={auth_client.redirect_uri})")
    return RedirectResponse(url=auth_url)


@router.get("/google-drive/callback")
async def google_drive_callback(
    request: Request,
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    state: Optional[str] = Query(None, description="Opaque state echoed by Google"),
    error: Optional[str] = Query(None, description="Error from Google"),
    db: Session = Depends(get_db),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """
    Handle the Google OAuth callback.

    Flow:
        1. Google reported an error → error=auth_denied
        2. No code → error=no_code
        3. Exchange code + fetch profile, failure → error=auth_failed
        4. Upsert the connection by Google email, failure → error=db_save_failed
        5. Issue the session cookie → google_drive_connected=true
           (failing to record the session on the user row is only logged)

    Repeating the callback for the same Google account updates the same row.
    """
    if error:
        logger.warning(f"Google OAuth error: {error}")
        return dashboard_redirect(request, error="auth_denied")

    if not code:
        logger.warning("Authorization code not found in OAuth callback")
        return dashboard_redirect(request, error="no_code")

    logger.info(f"OAuth callback received (has_state={state is not None})")

    try:
        tokens = await auth_client.exchange_code_for_tokens(code=code)
        profile = await auth_client.get_user_info(tokens.access_token)
    except Exception as e:
        logger.error(f"Google OAuth callback failed: {e}")
        return dashboard_redirect(request, error="auth_failed")

    try:
        connection = DriveConnectionService(db).save_google_drive_connection(tokens, profile)
    except StoreError as e:
        logger.error(f"Error saving Google Drive connection for {profile.email}: {e}")
        return dashboard_redirect(request, error="db_save_failed")

    token, session_id = create_session_token(connection.google_email)

    # The connection is already committed here
    try:
        UserService(db).record_session(connection.owner, session_id)
    except StoreError as e:
        logger.warning(f"Could not record session for {connection.google_email}: {e}")

    logger.info(f"Google Drive connected for {connection.google_email}")

    response = dashboard_redirect(request, google_drive_connected="true")
    set_session_cookie(response, token)
    return response


@router.get("/google-drive/status", response_model=DriveConnectionStatus)
def google_drive_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Report whether the session's Google account has a usable connection.

    Usable means active and not past token_expires_at.
    """
    connection = DriveConnectionService(db).get_active_connection(current_user.email)
    if connection is None:
        return DriveConnectionStatus(connected=False, google_email=current_user.email)

    return DriveConnectionStatus(
        connected=True,
        google_email=connection.google_email,
        expires_at=connection.token_expires_at,
    )


@router.post("/logout")
def logout():
    """Clear the session cookie. Stored connections are left untouched."""
    response = Response(status_code=status.HTTP_200_OK)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return response
