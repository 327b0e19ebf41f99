"""Application schemas."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ApplyRequest(BaseModel):
    drive_id: Optional[UUID] = None


class StatusUpdateRequest(BaseModel):
    status: Optional[str] = Field(None, description="Applied, Shortlisted, Exam Scheduled, Interview Scheduled, Selected or Rejected")
    remarks: Optional[str] = Field(None, max_length=2000)


class ApplicationCreatedResponse(BaseModel):
    message: str
    id: UUID


class MessageResponse(BaseModel):
    message: str


class ApplicationSummary(BaseModel):
    """Student's view of one application."""
    id: UUID
    drive_id: UUID
    status: str
    applied_at: datetime
    updated_at: Optional[datetime] = None
    company_name: str
    role: str
    company_type: Optional[str] = None
    ctc: Optional[str] = None
    drive_date: Optional[date] = None


class StatusHistoryEntry(BaseModel):
    old_status: Optional[str] = None
    new_status: str
    remarks: Optional[str] = None
    changed_at: datetime

    class Config:
        from_attributes = True


class ApplicationDetail(ApplicationSummary):
    job_description: Optional[str] = None
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)


class DriveApplicant(BaseModel):
    """Admin view of an application with the applicant's academic snapshot."""
    id: UUID
    status: str
    applied_at: datetime
    updated_at: Optional[datetime] = None
    usn: str
    full_name: str
    email: str
    phone: Optional[str] = None
    cgpa: Optional[float] = None
    branch: Optional[str] = None
    active_backlogs: Optional[int] = None
