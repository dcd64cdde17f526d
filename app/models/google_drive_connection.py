"""
Google Drive Connection model - stores OAuth tokens for one Google account.

One row per Google email. The OAuth callback upserts on google_email, so
reconnecting the same account refreshes the tokens in place instead of
adding a row. The stored tokens are handed to the automation workflow,
which writes the generated copy into that account's Drive.

Example:
    connection = GoogleDriveConnection(
        user_id=user.id,
        google_email="owner@example.com",
        access_token="ya29.xxx",
        refresh_token="1//xxx",
        token_expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scope="https://www.googleapis.com/auth/drive ...",
    )
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, Text, Boolean, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.user import User


class GoogleDriveConnection(Base):
    """
    SQLAlchemy ORM model for the 'google_drive_connections' table.

    Key Features:
    - Unique per google_email (the upsert conflict target)
    - is_active marks whether the tokens may be used
    - Usability is decided at read time by comparing token_expires_at to now;
      there is no rotation or revocation
    """

    __tablename__ = "google_drive_connections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # user_id: Owner of the connection (CASCADE keeps test cleanup simple)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # google_email: The connected Google account, one row each
    google_email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    # ---------------------------------------------------------------------------
    # TOKEN DATA
    # ---------------------------------------------------------------------------
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    token_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # scope: Space-separated scopes exactly as Google granted them
    scope: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---------------------------------------------------------------------------
    # STATUS
    # ---------------------------------------------------------------------------
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    retry_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_error_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_used: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # ---------------------------------------------------------------------------
    # TIMESTAMPS
    # ---------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship("User", back_populates="drive_connections")

    # ---------------------------------------------------------------------------
    # HELPER METHODS
    # ---------------------------------------------------------------------------
    def to_webhook_credentials(self) -> dict:
        """Credential block embedded in the payload sent to the workflow."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.token_expires_at.isoformat() if self.token_expires_at else None,
            "google_email": self.google_email,
        }

    def __repr__(self) -> str:
        return f"<GoogleDriveConnection(google_email='{self.google_email}', is_active={self.is_active})>"
