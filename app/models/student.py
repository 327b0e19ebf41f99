"""Student and academic record models."""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base


class Student(Base):
    """Student profile model."""

    __tablename__ = "students"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    usn = Column(String(20), unique=True, index=True, nullable=False)
    phone = Column(String(20))

    # Set only when an application moves to Selected
    is_placed = Column(Boolean, default=False, nullable=False)

    # Relationships
    user = relationship("User", backref="student_profile")
    academics = relationship("StudentAcademic", back_populates="student", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Student {self.usn}>"


class StudentAcademic(Base):
    """Academic record used for drive eligibility."""

    __tablename__ = "student_academics"
    __table_args__ = (
        CheckConstraint("cgpa IS NULL OR (cgpa >= 0 AND cgpa <= 10)", name="ck_student_academics_cgpa_range"),
        CheckConstraint("active_backlogs >= 0", name="ck_student_academics_backlogs_non_negative"),
    )

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), unique=True, nullable=False)
    cgpa = Column(Numeric(4, 2, asdecimal=False), nullable=True)  # filled in by the student after registration
    active_backlogs = Column(Integer, default=0, nullable=False)
    branch = Column(String(100), nullable=False)
    batch_year = Column(Integer, nullable=False)

    student = relationship("Student", back_populates="academics")

    def __repr__(self):
        return f"<StudentAcademic {self.branch} cgpa={self.cgpa}>"
