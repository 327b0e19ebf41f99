"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Student registration request schema."""

    usn: str = Field(..., min_length=1, max_length=20, description="University seat number")
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    branch: str = Field(..., min_length=1, max_length=100, description="e.g. CS, EC, ME")
    batch_year: int = Field(..., ge=2000, le=2100)


class RegisterResponse(BaseModel):
    """Register response schema."""

    message: str
    usn: str
    email: str
    full_name: str


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    token_type: str
    user: "UserResponse"


class UserResponse(BaseModel):
    """Current user as seen by the lifecycle operations."""

    id: UUID
    email: str
    full_name: str
    role: str
    is_active: bool
    is_placed: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


# Rebuild models to resolve forward references
LoginResponse.model_rebuild()
