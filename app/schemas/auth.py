"""
Auth schemas - Google Drive connection status for the current session.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class DriveConnectionStatus(BaseModel):
    """
    Response of GET /api/auth/google-drive/status.

    Example response:
    {
        "connected": true,
        "google_email": "owner@example.com",
        "expires_at": "2026-10-18T11:30:00Z"
    }
    """
    connected: bool
    google_email: Optional[str] = None
    expires_at: Optional[datetime] = None
