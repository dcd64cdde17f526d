"""
Usage schemas - typed payloads for project_usage rows and the workflow callback.

request_data and response_data are JSON columns; these models are the only
shapes the store writes into them.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


LINK_SCHEMES = {"http", "https"}


def is_web_link(value: str) -> bool:
    return urlparse(value.strip()).scheme.lower() in LINK_SCHEMES


# ---------------------------------------------------------------------------
# STATUS
# ---------------------------------------------------------------------------

class UsageStatus(str, Enum):
    """
    Lifecycle of a generation request.

    Only moves forward: pending → ready | error.
    """
    PENDING = "pending"
    READY = "ready"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not UsageStatus.PENDING


# ---------------------------------------------------------------------------
# STORED PAYLOADS
# ---------------------------------------------------------------------------

class WebsiteGenerationRequest(BaseModel):
    """
    request_data for a website copy generation.

    Example:
    {
        "request_type": "website_generation",
        "project_name": "Acme Bakery",
        "business_details": "Family bakery in Leeds ...",
        "website_structure": "Home, About, Menu, Contact"
    }
    """
    request_type: Literal["website_generation"] = "website_generation"
    project_name: str = Field(..., min_length=1)
    business_details: str = Field(..., min_length=1)
    website_structure: str = Field(..., min_length=1)


class UsageResult(BaseModel):
    """response_data, filled in from the workflow callback."""
    output_link: Optional[str] = None
    error_message: Optional[str] = None


# ---------------------------------------------------------------------------
# CALLBACK BODY
# ---------------------------------------------------------------------------

class CallbackPayload(BaseModel):
    """
    Body of POST /api/callback, sent by the n8n workflow.

    Example request body:
    {
        "id": "5f0c...",
        "status": "ready",
        "outputLink": "https://docs.google.com/document/d/..."
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    status: UsageStatus
    output_link: Optional[str] = Field(None, alias="outputLink")
    error_message: Optional[str] = Field(None, alias="errorMessage")

    @field_validator("output_link")
    @classmethod
    def output_link_is_web_link(cls, v: Optional[str]) -> Optional[str]:
        if v and not is_web_link(v):
            raise ValueError("outputLink must be an http or https URL")
        return v


# ---------------------------------------------------------------------------
# RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class UsageOut(BaseModel):
    """A project_usage row as returned by the callback receiver."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    request_type: str
    status: str
    output_link: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class HistoryItem(BaseModel):
    """
    One row of the history list: a usage joined with its project.

    Example response item:
    {
        "id": "5f0c...",
        "project_name": "Acme Bakery",
        "business_details": "Family bakery in Leeds ...",
        "website_structure": "Home, About, Menu, Contact",
        "status": "ready",
        "output_link": "https://drive.example/doc",
        "error_message": null,
        "created_at": "2026-10-18T10:30:00Z",
        "updated_at": "2026-10-18T10:33:12Z"
    }
    """
    id: uuid.UUID
    project_name: str
    business_details: str = ""
    website_structure: str = ""
    status: str
    output_link: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
