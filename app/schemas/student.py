"""
Pydantic schemas for the academic profile
"""

from typing import Optional

from pydantic import BaseModel, Field


class AcademicProfileUpdate(BaseModel):
    """Self-service academic details. Only provided fields are updated."""
    cgpa: Optional[float] = Field(None, ge=0, le=10, description="Cumulative GPA on a 10 point scale")
    active_backlogs: Optional[int] = Field(None, ge=0, description="Courses failed and not yet cleared")
    branch: Optional[str] = Field(None, min_length=1, max_length=100)
    batch_year: Optional[int] = Field(None, ge=2000, le=2100)


class AcademicProfileResponse(BaseModel):
    usn: str
    full_name: str
    cgpa: Optional[float] = None
    active_backlogs: int
    branch: str
    batch_year: int
    is_placed: bool
