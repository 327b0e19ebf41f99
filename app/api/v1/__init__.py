"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth
from app.api.v1.endpoints import applications, drives, inbox, profile

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(profile.router, prefix="/profile", tags=["Student Profile"])
api_router.include_router(drives.router, prefix="/drives", tags=["Placement Drives"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
api_router.include_router(inbox.router, prefix="/inbox", tags=["Inbox"])
