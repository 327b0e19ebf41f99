"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from app.models.user import User

# Models with foreign keys to base models
from app.models.student import Student, StudentAcademic
from app.models.drive import PlacementDrive, DriveStatus

# Models with foreign keys to other models
from app.models.application import Application, ApplicationStatus, ApplicationStatusHistory
from app.models.inbox import InboxMessage, MessageType

# Export all models
__all__ = [
    "User",
    "Student",
    "StudentAcademic",
    "PlacementDrive",
    "DriveStatus",
    "Application",
    "ApplicationStatus",
    "ApplicationStatusHistory",
    "InboxMessage",
    "MessageType",
]
