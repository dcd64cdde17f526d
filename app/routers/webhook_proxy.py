"""
Webhook Proxy Router - browser-facing relay to the n8n workflow.

Endpoints:
- POST /api/webhook-proxy → Forward the JSON body verbatim to N8N_WEBHOOK_URL
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.exceptions import WebhookNotConfiguredError, WebhookUpstreamError
from app.deps import get_webhook_proxy
from app.services.webhook_proxy import WebhookProxy


logger = logging.getLogger("tekton.routers.webhook_proxy")

router = APIRouter(prefix="/api", tags=["webhook"])


@router.post("/webhook-proxy")
async def forward_to_webhook(
    request: Request,
    proxy: WebhookProxy = Depends(get_webhook_proxy),
):
    """
    Relay a JSON body to the workflow and return its JSON answer.

    Raises:
        400 Bad Request: Body is not valid JSON
        500 Internal Server Error: N8N_WEBHOOK_URL is not configured
        502 Bad Gateway: Workflow unreachable
        <upstream status>: Workflow answered non-2xx
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON body",
        )

    try:
        result = await proxy.forward(payload)
    except WebhookNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    except WebhookUpstreamError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return result.body
