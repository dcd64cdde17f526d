"""
Project model - a named unit of business context reused across requests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.project_usage import ProjectUsage


class Project(Base):
    """
    SQLAlchemy ORM model for the 'projects' table.

    Created the first time a user submits a given project name.
    (user_id, project_name) is unique, so "find or create" is a single
    conditional insert. Names match exactly (case-sensitive).
    """

    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint("user_id", "project_name", name="uq_projects_user_project_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    project_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # business_details: Kept as first saved; reusing the name does not overwrite it
    business_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(50), default="active", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship("User", back_populates="projects")
    usages: Mapped[list["ProjectUsage"]] = relationship("ProjectUsage", back_populates="project")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, project_name='{self.project_name}')>"
