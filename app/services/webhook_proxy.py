"""
Webhook Proxy - relays a JSON job to the n8n automation workflow.

One POST per call: no retry, no signing, httpx's default timeout.
The workflow answers later through POST /api/callback.

Usage:
    proxy = WebhookProxy()
    result = await proxy.forward({"id": "...", "projectName": "...", ...})
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import WebhookNotConfiguredError, WebhookUpstreamError


logger = logging.getLogger("tekton.services.webhook_proxy")


@dataclass
class WebhookResult:
    """Successful (2xx) upstream answer."""
    status_code: int
    body: Any


class WebhookProxy:
    """
    Pass-through relay to the configured workflow URL.

    Attributes:
        url: Target webhook URL (defaults to settings.N8N_WEBHOOK_URL)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url: Override the configured webhook URL
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.url = url if url is not None else settings.N8N_WEBHOOK_URL
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    async def forward(self, payload: Any) -> WebhookResult:
        """
        POST payload verbatim as JSON to the workflow.

        Returns:
            WebhookResult with the upstream JSON body (non-JSON text is
            wrapped as {"message": text})

        Raises:
            WebhookNotConfiguredError: No URL configured; nothing is sent
            WebhookUpstreamError: Non-2xx answer (upstream status) or
                                  network failure (502)
        """
        if not self.is_configured:
            logger.error("N8N_WEBHOOK_URL is not set in environment variables.")
            raise WebhookNotConfiguredError("N8N_WEBHOOK_URL is not configured")

        job_id = payload.get("id") if isinstance(payload, dict) else None
        logger.info(f"Forwarding job {job_id} to n8n webhook")

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(
                    self.url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.RequestError as e:
                logger.error(f"Network error calling n8n webhook: {e}")
                raise WebhookUpstreamError(
                    f"n8n webhook unreachable: {e}",
                    status_code=502,
                )

        if not response.is_success:
            logger.error(f"Error from n8n webhook: {response.status_code} {response.text}")
            raise WebhookUpstreamError(
                f"n8n webhook failed: {response.text}",
                status_code=response.status_code,
                detail=response.text,
            )

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text}

        logger.info(f"n8n webhook accepted job {job_id} ({response.status_code})")
        return WebhookResult(status_code=response.status_code, body=body)
