"""
Dependencies module - reusable FastAPI dependencies for route handlers.

- get_current_user / get_optional_user resolve the session token
  (cookie set by the OAuth callback, or an Authorization: Bearer header)
  to a User.
- get_google_auth_client / get_webhook_proxy build the outbound clients;
  tests swap them through app.dependency_overrides.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_session_token
from app.db.session import get_db
from app.environments.google import GoogleAuthClient
from app.models.user import User
from app.services.user_service import UserService
from app.services.webhook_proxy import WebhookProxy


logger = logging.getLogger("tekton.deps")

# auto_error=False: the cookie is the usual carrier, the header is optional
security = HTTPBearer(auto_error=False)


def _session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Resolve the session to a User, or None when there is no valid session.

    A valid token for an email with no user row creates the row
    (first session-based interaction).
    """
    token = _session_token(request, credentials)
    if not token:
        return None

    email = decode_session_token(token)
    if email is None:
        logger.debug("Ignoring invalid or expired session token")
        return None

    return UserService(db).get_or_create_user_by_email(email)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    Require a session.

    Raises:
        401 Unauthorized: Missing, invalid or expired session token
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not connected. Connect your Google Drive to start a session.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_google_auth_client() -> GoogleAuthClient:
    return GoogleAuthClient()


def get_webhook_proxy() -> WebhookProxy:
    return WebhookProxy()


def app_base_url(request: Request) -> str:
    """APP_URL if configured, else the base URL this request came in on."""
    return settings.app_base_url or str(request.base_url).rstrip("/")
