"""
Google Environment Module - Google account integration.

google/
├── __init__.py
└── auth/
    ├── client.py     # OAuth code flow + userinfo
    └── schemas.py    # Token / profile structures and scope constants

Usage:
    from app.environments.google import GoogleAuthClient, DRIVE_CONNECT_SCOPES

    auth_client = GoogleAuthClient()
    auth_url = auth_client.get_authorization_url(scopes=DRIVE_CONNECT_SCOPES, state="...")
"""

from app.environments.google.auth import GoogleAuthClient, DRIVE_CONNECT_SCOPES

__all__ = [
    "GoogleAuthClient",
    "DRIVE_CONNECT_SCOPES",
]
