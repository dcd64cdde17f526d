"""
Project Service - projects, generation requests and their status.

Projects:
    get_or_create_project() is one conditional insert on the unique
    (user_id, project_name) pair followed by a select, so two identical
    submissions racing each other still share a single project row.

Requests (project_usage rows):
    create_usage() writes a pending row with a validated request payload.
    update_usage_status() is driven only by the workflow callback and
    never moves a row backwards out of a terminal status.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, or_, select

from app.core.exceptions import StatusTransitionError, UsageNotFoundError
from app.models.project import Project
from app.models.project_usage import ProjectUsage
from app.models.user import User
from app.schemas.usage import (
    HistoryItem,
    UsageResult,
    UsageStatus,
    WebsiteGenerationRequest,
)
from app.services.store_base import StoreService, insert_for


logger = logging.getLogger("tekton.services.projects")


class ProjectService(StoreService):
    """
    Usage:
        projects = ProjectService(db)
        project = projects.get_or_create_project(user, "Acme Bakery", "Family bakery ...")
        usage = projects.create_usage(user, project, WebsiteGenerationRequest(...))

        # later, from the workflow callback
        projects.update_usage_status(str(usage.id), UsageStatus.READY, output_link="https://...")
    """

    # -------------------------------------------------------------------------
    # PROJECTS
    # -------------------------------------------------------------------------

    def get_or_create_project(
        self,
        user: User,
        project_name: str,
        business_details: Optional[str],
    ) -> Project:
        """
        Return the user's project with exactly this name, creating it if absent.

        Matching is case-sensitive. An existing project keeps its stored
        business_details.
        """
        with self._translate_errors("create project"):
            table = Project.__table__
            stmt = (
                insert_for(self.db, table)
                .values(
                    user_id=user.id,
                    project_name=project_name,
                    business_details=business_details,
                )
                .on_conflict_do_nothing(index_elements=[table.c.user_id, table.c.project_name])
            )
            result = self.db.execute(stmt)
            self.db.commit()

            project = self.db.scalars(
                select(Project).where(
                    Project.user_id == user.id,
                    Project.project_name == project_name,
                )
            ).one()

        if result.rowcount:
            logger.info(f"Created project {project.id} '{project_name}' for user {user.id}")
        else:
            logger.info(f"Using existing project {project.id} '{project_name}'")

        return project

    def list_projects(self, user: User) -> List[Project]:
        """The user's projects, newest first (project picker)."""
        with self._translate_errors("fetch projects"):
            return list(
                self.db.scalars(
                    select(Project)
                    .where(Project.user_id == user.id)
                    .order_by(Project.created_at.desc())
                )
            )

    # -------------------------------------------------------------------------
    # REQUESTS
    # -------------------------------------------------------------------------

    def create_usage(
        self,
        user: User,
        project: Project,
        request: WebsiteGenerationRequest,
    ) -> ProjectUsage:
        """Create a pending request row for a project."""
        with self._translate_errors("create project usage"):
            usage = ProjectUsage(
                user_id=user.id,
                project_id=project.id,
                request_type=request.request_type,
                request_data=request.model_dump(),
                response_data=None,
                website_structure=request.website_structure,
                status=UsageStatus.PENDING.value,
            )
            self.db.add(usage)
            self.db.commit()
            self.db.refresh(usage)

        logger.info(f"Created pending usage {usage.id} for project {project.id}")
        return usage

    def list_usage_history(self, user: User, search: Optional[str] = None) -> List[HistoryItem]:
        """
        The user's requests joined with project name and details, newest first.

        Args:
            search: Optional case-insensitive substring matched against project
                    name, business details and website structure
        """
        stmt = (
            select(ProjectUsage, Project)
            .join(Project, ProjectUsage.project_id == Project.id)
            .where(ProjectUsage.user_id == user.id)
            .order_by(ProjectUsage.created_at.desc())
        )

        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Project.project_name).like(pattern),
                    func.lower(func.coalesce(Project.business_details, "")).like(pattern),
                    func.lower(func.coalesce(ProjectUsage.website_structure, "")).like(pattern),
                )
            )

        with self._translate_errors("fetch project usage"):
            rows = self.db.execute(stmt).all()

        return [_history_item(usage, project) for usage, project in rows]

    def update_usage_status(
        self,
        usage_id: str,
        status: UsageStatus,
        output_link: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> ProjectUsage:
        """
        Apply a workflow callback to a request row.

        output_link and error_message are only written when provided.
        Re-applying the row's current status is allowed, so a duplicate
        callback repeats the same update.

        Raises:
            UsageNotFoundError: usage_id is malformed or unknown
            StatusTransitionError: row is terminal and status differs
        """
        try:
            usage_uuid = uuid.UUID(str(usage_id))
        except ValueError:
            raise UsageNotFoundError(usage_id)

        with self._translate_errors("update project usage status"):
            usage = self.db.get(ProjectUsage, usage_uuid)
            if usage is None:
                raise UsageNotFoundError(usage_id)

            current = UsageStatus(usage.status)
            if current.is_terminal and status is not current:
                raise StatusTransitionError(current.value, status.value)

            usage.status = status.value
            if output_link:
                usage.output_link = output_link
            if error_message:
                usage.error_message = error_message
            usage.response_data = UsageResult(
                output_link=usage.output_link,
                error_message=usage.error_message,
            ).model_dump()

            self.db.commit()
            self.db.refresh(usage)

        logger.info(f"Usage {usage.id} status {current.value} -> {status.value}")
        return usage


def _history_item(usage: ProjectUsage, project: Project) -> HistoryItem:
    request_data = usage.request_data or {}
    return HistoryItem(
        id=usage.id,
        project_name=project.project_name,
        business_details=project.business_details or "",
        website_structure=usage.website_structure or request_data.get("website_structure", ""),
        status=usage.status,
        output_link=usage.output_link,
        error_message=usage.error_message,
        created_at=usage.created_at,
        updated_at=usage.updated_at,
    )
