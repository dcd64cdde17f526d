"""
Projects Router - project picker, generation form and request history.

Endpoints:
- GET  /api/projects          → The session user's projects, newest first
- POST /api/projects/generate → Submit the "new copy" form to the workflow
- GET  /api/history?q=        → The session user's requests, newest first

All endpoints require a session (cookie or Bearer token).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.core.exceptions import (
    DriveNotConnectedError,
    StoreError,
    WebhookNotConfiguredError,
    WebhookUpstreamError,
)
from app.db.session import get_db
from app.deps import app_base_url, get_current_user, get_webhook_proxy
from app.models.user import User
from app.schemas.project import GenerateRequest, GenerateResponse, ProjectOut
from app.schemas.usage import HistoryItem, UsageStatus
from app.services.generation_service import GenerationService
from app.services.project_service import ProjectService
from app.services.webhook_proxy import WebhookProxy


logger = logging.getLogger("tekton.routers.projects")

router = APIRouter(prefix="/api", tags=["projects"])


@router.get("/projects", response_model=List[ProjectOut])
def list_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's projects for the project picker."""
    try:
        return ProjectService(db).list_projects(current_user)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )


@router.post(
    "/projects/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_copy(
    form: GenerateRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    proxy: WebhookProxy = Depends(get_webhook_proxy),
):
    """
    Create a pending request for a project and hand it to the workflow.

    Example request body:
    {
        "projectName": "Acme Bakery",
        "businessDetails": "Family bakery in Leeds, warm and friendly tone",
        "websiteStructure": "Home, About, Menu, Contact"
    }

    Returns:
        202 {"id": "<usage id>", "projectId": "<project id>", "status": "pending"}

    Raises:
        409 Conflict: No active Google Drive connection
        422 Unprocessable Entity: A field is missing or blank
        500 Internal Server Error: Database failure or webhook not configured
        502 / upstream status: The workflow rejected or never received the job
    """
    callback_url = f"{app_base_url(request)}/api/callback"

    try:
        result = await GenerationService(db, proxy).submit(
            current_user, form, callback_url=callback_url
        )
    except DriveNotConnectedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    except WebhookNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    except WebhookUpstreamError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return GenerateResponse(
        id=result.usage.id,
        project_id=result.project.id,
        status=UsageStatus.PENDING.value,
    )


@router.get("/history", response_model=List[HistoryItem])
def list_history(
    q: Optional[str] = Query(None, description="Search project name, details and structure"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's requests with their project, newest first."""
    try:
        return ProjectService(db).list_usage_history(current_user, search=q)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
