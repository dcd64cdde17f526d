"""
Generation Service - the "new copy" form submission.

Steps:
1. Require a configured webhook and an active Google Drive connection
   for the user's email; nothing is written otherwise
2. Find or create the project by exact name
3. Create a pending request row
4. Send the job, with the Drive credentials, to the workflow webhook

There is no transaction across steps 2-4. If the process dies after the
project is created the project simply has no requests yet; if the webhook
fails the request row stays pending. Only the workflow callback moves a
request out of pending.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.exceptions import DriveNotConnectedError, WebhookNotConfiguredError
from app.models.project import Project
from app.models.project_usage import ProjectUsage
from app.models.user import User
from app.schemas.project import GenerateRequest
from app.schemas.usage import WebsiteGenerationRequest
from app.services.drive_connection_service import DriveConnectionService
from app.services.project_service import ProjectService
from app.services.webhook_proxy import WebhookProxy, WebhookResult


logger = logging.getLogger("tekton.services.generation")


@dataclass
class GenerationResult:
    project: Project
    usage: ProjectUsage
    webhook: WebhookResult


class GenerationService:
    """
    Usage:
        service = GenerationService(db, WebhookProxy())
        result = await service.submit(user, form, callback_url="https://app/api/callback")
    """

    def __init__(self, db: Session, proxy: WebhookProxy):
        self.projects = ProjectService(db)
        self.connections = DriveConnectionService(db)
        self.proxy = proxy

    async def submit(
        self,
        user: User,
        form: GenerateRequest,
        callback_url: str,
    ) -> GenerationResult:
        """
        Run the submission flow for one form.

        Raises:
            DriveNotConnectedError: No active, unexpired connection for user.email
            StoreError: A database write failed
            WebhookNotConfiguredError / WebhookUpstreamError: The job was not accepted
        """
        if not self.proxy.is_configured:
            logger.error("Refusing generation: N8N_WEBHOOK_URL is not set")
            raise WebhookNotConfiguredError("N8N_WEBHOOK_URL is not configured")

        connection = self.connections.get_active_connection(user.email)
        if connection is None:
            raise DriveNotConnectedError(
                "Please connect your Google Drive to create projects."
            )

        project = self.projects.get_or_create_project(
            user, form.project_name, form.business_details
        )

        usage = self.projects.create_usage(
            user,
            project,
            WebsiteGenerationRequest(
                project_name=form.project_name,
                business_details=form.business_details,
                website_structure=form.website_structure,
            ),
        )

        payload = {
            "id": str(usage.id),
            "projectName": form.project_name,
            "businessDetails": form.business_details,
            "websiteStructure": form.website_structure,
            "callbackUrl": callback_url,
            "googleDriveCredentials": connection.to_webhook_credentials(),
        }

        webhook_result = await self.proxy.forward(payload)
        self.connections.mark_used(connection)

        logger.info(f"Generation {usage.id} sent for project '{form.project_name}'")
        return GenerationResult(project=project, usage=usage, webhook=webhook_result)
