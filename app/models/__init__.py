"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from app.models.user import User
from app.models.google_drive_connection import GoogleDriveConnection
from app.models.project import Project
from app.models.project_usage import ProjectUsage

__all__ = [
    "User",
    "GoogleDriveConnection",
    "Project",
    "ProjectUsage",
]
