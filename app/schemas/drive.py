"""Placement drive schemas."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.drive import DriveStatus
from app.utils.helpers import parse_json_list, to_naive_utc


class DriveBase(BaseModel):
    company_type: Optional[str] = Field(None, max_length=50)
    ctc: Optional[str] = Field(None, max_length=100, description="e.g. '12 LPA'")
    job_description: Optional[str] = None
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0, description="Leave empty for no limit")
    allowed_branches: Optional[List[str]] = Field(None, description="Leave empty to allow all branches")
    registration_deadline: Optional[datetime] = None

    @field_validator("registration_deadline")
    @classmethod
    def deadline_to_utc(cls, v):
        """Deadlines are stored as naive UTC; offsets are applied before storing."""
        return to_naive_utc(v)


class DriveCreate(DriveBase):
    """Admin drive creation. Company name, role and drive date are required."""
    company_name: Optional[str] = Field(None, max_length=255)
    role: Optional[str] = Field(None, max_length=255)
    drive_date: Optional[date] = None


class DriveUpdate(DriveBase):
    """Partial update. Only provided fields are changed."""
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[str] = Field(None, min_length=1, max_length=255)
    drive_date: Optional[date] = None
    status: Optional[DriveStatus] = None


class DriveResponse(BaseModel):
    id: UUID
    company_name: str
    role: str
    company_type: Optional[str] = None
    ctc: Optional[str] = None
    job_description: Optional[str] = None
    min_cgpa: Optional[float] = None
    max_backlogs: Optional[int] = None
    allowed_branches: Optional[List[str]] = None
    drive_date: date
    registration_deadline: Optional[datetime] = None
    status: str
    created_at: datetime
    has_applied: bool = False

    @field_validator("allowed_branches", mode="before")
    @classmethod
    def decode_branches(cls, v):
        """Stored as JSON text; unparseable values are shown as no restriction."""
        return parse_json_list(v)

    class Config:
        from_attributes = True


class DriveWithEligibility(DriveResponse):
    eligible: Optional[bool] = None  # None for admins
    eligibility_reasons: Optional[List[str]] = None


class DrivePreview(BaseModel):
    id: UUID
    company_name: str
    role: str
    drive_date: date
    registration_deadline: Optional[datetime] = None
    ctc: Optional[str] = None

    class Config:
        from_attributes = True


class DriveCreatedResponse(BaseModel):
    message: str
    id: UUID
