"""
Project Usage model - one row per generation request.

Lifecycle:
    pending  → created by the generation flow, before the webhook call
    ready    → written by the workflow callback, with output_link
    error    → written by the workflow callback, with error_message

The application never moves a row out of pending itself; only
POST /api/callback does.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.project import Project


class ProjectUsage(Base):
    """SQLAlchemy ORM model for the 'project_usage' table."""

    __tablename__ = "project_usage"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # ---------------------------------------------------------------------------
    # REQUEST / RESPONSE PAYLOADS
    # ---------------------------------------------------------------------------
    # request_type: Tag of the request_data schema ("website_generation")
    request_type: Mapped[str] = mapped_column(String(50), nullable=False)

    # request_data / response_data: Validated by app.schemas.usage before write
    request_data: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    response_data: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # website_structure: Copied out of request_data for the history view
    website_structure: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---------------------------------------------------------------------------
    # STATUS
    # ---------------------------------------------------------------------------
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False, index=True)
    output_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship("User", back_populates="usages")
    project: Mapped["Project"] = relationship("Project", back_populates="usages")

    def __repr__(self) -> str:
        return f"<ProjectUsage(id={self.id}, status='{self.status}')>"
