"""
Callback Router - receives job results from the n8n workflow.

Endpoints:
- POST /api/callback → Move a request row to ready/error and record the output

The workflow calls this once per job with the id it was given by the
generation flow. There is no authentication on this endpoint.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.exceptions import StatusTransitionError, StoreError, UsageNotFoundError
from app.db.session import get_db
from app.schemas.usage import CallbackPayload, UsageOut
from app.services.project_service import ProjectService


logger = logging.getLogger("tekton.routers.callback")

router = APIRouter(prefix="/api", tags=["callback"])


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON body",
        )
    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Callback body must be a JSON object",
        )
    return body


@router.post("/callback")
async def receive_callback(request: Request, db: Session = Depends(get_db)):
    """
    Apply a workflow result to its request row.

    Example request body:
    {
        "id": "5f0c...",
        "status": "ready",
        "outputLink": "https://docs.google.com/document/d/..."
    }

    Raises:
        400 Bad Request: No id in the body (store not touched)
        404 Not Found: No request row with this id
        409 Conflict: Row already finished with a different status
        422 Unprocessable Entity: status is not pending, ready or error,
                                  or outputLink is not an http(s) URL
        500 Internal Server Error: Database failure
    """
    body = await _json_body(request)

    if not body.get("id"):
        logger.warning("Callback received without an id")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing ID in callback",
        )

    try:
        payload = CallbackPayload.model_validate(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        )

    logger.info(f"Callback for usage {payload.id}: status={payload.status.value}")

    try:
        usage = ProjectService(db).update_usage_status(
            payload.id,
            payload.status,
            output_link=payload.output_link,
            error_message=payload.error_message,
        )
    except UsageNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update project usage: {e}",
        )

    return {
        "message": "Callback processed successfully",
        "usage": UsageOut.model_validate(usage).model_dump(mode="json"),
    }
