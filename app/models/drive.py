"""Placement drive model."""

import enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base


class DriveStatus(str, enum.Enum):
    """Lifecycle status of a placement drive."""
    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    CLOSED = "Closed"
    CANCELLED = "Cancelled"


# Drives in these states accept new applications
OPEN_DRIVE_STATUSES = (DriveStatus.UPCOMING.value, DriveStatus.ONGOING.value)


class PlacementDrive(Base):
    """A company's recruitment drive."""

    __tablename__ = "placement_drives"

    company_name = Column(String(255), nullable=False, index=True)
    role = Column(String(255), nullable=False)
    company_type = Column(String(50), default="Service")  # Product, Service, Startup, ...
    ctc = Column(String(100))
    job_description = Column(Text)

    # Eligibility
    min_cgpa = Column(Numeric(4, 2, asdecimal=False), nullable=True)
    max_backlogs = Column(Integer, nullable=True)  # NULL = unlimited
    allowed_branches = Column(Text, nullable=True)  # JSON array, NULL = all branches

    # Dates
    drive_date = Column(Date, nullable=False)
    registration_deadline = Column(DateTime, nullable=True)

    status = Column(String(20), default=DriveStatus.UPCOMING.value, nullable=False, index=True)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    applications = relationship("Application", back_populates="drive", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_drives_status_deadline", "status", "registration_deadline"),
    )

    def __repr__(self):
        return f"<PlacementDrive(id={self.id}, company={self.company_name}, role={self.role})>"
