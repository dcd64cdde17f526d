"""
Project schemas - project picker output and the generation form.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectOut(BaseModel):
    """A saved project, as listed in the project picker."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_name: str
    business_details: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class GenerateRequest(BaseModel):
    """
    Body of POST /api/projects/generate (the "new copy" form).

    All three fields are trimmed; blank values are rejected.

    Example request body:
    {
        "projectName": "Acme Bakery",
        "businessDetails": "Family bakery in Leeds, warm and friendly tone",
        "websiteStructure": "Home, About, Menu, Contact"
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field(..., alias="projectName", max_length=255)
    business_details: str = Field(..., alias="businessDetails")
    website_structure: str = Field(..., alias="websiteStructure")

    @field_validator("project_name", "business_details", "website_structure")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class GenerateResponse(BaseModel):
    """Returned once the request row exists and the webhook accepted the job."""
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    project_id: uuid.UUID = Field(..., alias="projectId")
    status: str
