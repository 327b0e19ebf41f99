"""Application and status history models."""

import enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.helpers import utcnow


class ApplicationStatus(str, enum.Enum):
    """Closed vocabulary for an application's status."""
    APPLIED = "Applied"
    SHORTLISTED = "Shortlisted"
    EXAM_SCHEDULED = "Exam Scheduled"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    SELECTED = "Selected"
    REJECTED = "Rejected"


class Application(Base):
    """A student's application to a placement drive."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("student_id", "drive_id", name="unique_student_drive_application"),
    )

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    drive_id = Column(Uuid(as_uuid=True), ForeignKey("placement_drives.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String(30), default=ApplicationStatus.APPLIED.value, nullable=False)
    applied_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    student = relationship("Student")
    drive = relationship("PlacementDrive", back_populates="applications")
    history = relationship(
        "ApplicationStatusHistory",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="ApplicationStatusHistory.changed_at",
    )

    def __repr__(self):
        return f"<Application {self.student_id} -> {self.drive_id} ({self.status})>"


class ApplicationStatusHistory(Base):
    """Append-only record of every status an application has held."""

    __tablename__ = "application_status_history"

    application_id = Column(Uuid(as_uuid=True), ForeignKey("applications.id", ondelete="CASCADE"), nullable=False)
    old_status = Column(String(30), nullable=True)  # NULL on the initial Applied entry
    new_status = Column(String(30), nullable=False)
    changed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    remarks = Column(Text, nullable=True)
    changed_at = Column(DateTime, default=utcnow, nullable=False)

    application = relationship("Application", back_populates="history")

    __table_args__ = (
        Index("idx_status_history_application", "application_id", "changed_at"),
    )

    def __repr__(self):
        return f"<ApplicationStatusHistory {self.old_status} -> {self.new_status}>"
