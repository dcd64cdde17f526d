"""
Google Auth Module - OAuth 2.0 for connecting a Google Drive.

OAuth 2.0 Flow Overview:
========================
1. User clicks "Connect Google Drive" on the dashboard
2. Backend generates the authorization URL (profile + drive scopes)
3. User grants permissions on Google's consent screen
4. Google redirects back with an authorization code
5. Backend exchanges the code for access + refresh tokens
6. Tokens are stored per Google email for the automation workflow
"""

from app.environments.google.auth.client import GoogleAuthClient
from app.environments.google.auth.schemas import (
    GoogleTokenResponse,
    GoogleUserInfo,
    DRIVE_CONNECT_SCOPES,
    DRIVE_SCOPES,
    PROFILE_SCOPES,
)

__all__ = [
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "GoogleUserInfo",
    "DRIVE_CONNECT_SCOPES",
    "DRIVE_SCOPES",
    "PROFILE_SCOPES",
]
