"""
User model - represents a person using the copy studio.
Users are identified by email and created on first Google Drive connect
(or first session-based interaction).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.google_drive_connection import GoogleDriveConnection
    from app.models.project import Project
    from app.models.project_usage import ProjectUsage


class User(Base):
    """
    SQLAlchemy ORM model for the 'users' table.

    A user can:
    - Connect one or more Google accounts for Drive access
    - Own named projects
    - Submit generation requests (project usage rows)
    """

    __tablename__ = "users"

    # ---------------------------------------------------------------------------
    # PRIMARY KEY
    # ---------------------------------------------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ---------------------------------------------------------------------------
    # IDENTITY
    # ---------------------------------------------------------------------------
    # email: The identity key. unique=True backs get-or-create by email.
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # google_user_id: Google's account id from the userinfo endpoint
    google_user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # session_id: "jti" of the most recently issued session token
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

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

    # last_active: Bumped when a session is issued for this user
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # ---------------------------------------------------------------------------
    # RELATIONSHIPS
    # ---------------------------------------------------------------------------
    drive_connections: Mapped[list["GoogleDriveConnection"]] = relationship(
        "GoogleDriveConnection", back_populates="owner"
    )
    projects: Mapped[list["Project"]] = relationship("Project", back_populates="owner")
    usages: Mapped[list["ProjectUsage"]] = relationship("ProjectUsage", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
