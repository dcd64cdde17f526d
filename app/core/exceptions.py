"""
Domain exceptions for the store and the webhook proxy.

Routers translate these into HTTP responses or redirect flags;
nothing here knows about HTTP status codes except WebhookUpstreamError,
which carries the upstream status so it can be propagated verbatim.
"""

from typing import Optional


# ---------------------------------------------------------------------------
# STORE ERRORS
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Raised when a database operation fails. Message is the underlying error."""
    pass


class UsageNotFoundError(StoreError):
    """Raised when a project_usage row does not exist for the given id."""

    def __init__(self, usage_id: str):
        super().__init__(f"Project usage not found: {usage_id}")
        self.usage_id = usage_id


class StatusTransitionError(StoreError):
    """Raised when a terminal usage row would move to a different status."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change status from '{current}' to '{requested}'"
        )
        self.current = current
        self.requested = requested


class MissingProfileEmailError(StoreError):
    """Raised when a Google profile arrives without an email address."""
    pass


# ---------------------------------------------------------------------------
# WEBHOOK ERRORS
# ---------------------------------------------------------------------------


class WebhookError(Exception):
    """Base exception for the outbound automation webhook."""
    pass


class WebhookNotConfiguredError(WebhookError):
    """Raised when N8N_WEBHOOK_URL is empty. No request is sent."""
    pass


class WebhookUpstreamError(WebhookError):
    """
    Raised when the webhook answers non-2xx or cannot be reached.

    status_code is the upstream status, or 502 for network errors.
    """

    def __init__(self, message: str, status_code: int, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or message


# ---------------------------------------------------------------------------
# GENERATION ERRORS
# ---------------------------------------------------------------------------


class DriveNotConnectedError(Exception):
    """Raised when a generation is submitted without an active Drive connection."""
    pass
