"""
Applications API
- Student: apply, withdraw, track own applications
- Admin: move applications through the status vocabulary, list applicants per drive
"""

from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_student, get_db, require_admin
from app.core.exceptions import PortalError, ValidationFailed
from app.models.application import Application, ApplicationStatusHistory
from app.models.drive import PlacementDrive
from app.models.student import Student, StudentAcademic
from app.models.user import User
from app.schemas.application import (
    ApplicationCreatedResponse,
    ApplicationDetail,
    ApplicationSummary,
    ApplyRequest,
    DriveApplicant,
    MessageResponse,
    StatusHistoryEntry,
    StatusUpdateRequest,
)
from app.services.application_service import application_service

logger = structlog.get_logger(__name__)

router = APIRouter()


def _summary_fields(application: Application, drive: PlacementDrive) -> dict:
    return {
        "id": application.id,
        "drive_id": application.drive_id,
        "status": application.status,
        "applied_at": application.applied_at,
        "updated_at": application.updated_at,
        "company_name": drive.company_name,
        "role": drive.role,
        "company_type": drive.company_type,
        "ctc": drive.ctc,
        "drive_date": drive.drive_date,
    }


# ==================== Student ====================

@router.get("", response_model=List[ApplicationSummary])
async def list_my_applications(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """
    List own applications, newest first

    **Auth**: Student (JWT required)
    """
    result = await db.execute(
        select(Application, PlacementDrive)
        .join(PlacementDrive, Application.drive_id == PlacementDrive.id)
        .where(Application.student_id == student.id)
        .order_by(Application.applied_at.desc())
    )
    return [
        ApplicationSummary(**_summary_fields(application, drive))
        for application, drive in result.all()
    ]


@router.post("", response_model=ApplicationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_drive(
    apply_in: ApplyRequest,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply for a placement drive

    **Auth**: Student (JWT required)

    Rejected with 400 and a reason when the student is placed, the drive is
    closed or past its deadline, the student already applied, the academic
    profile is incomplete, or an eligibility rule fails.
    """
    if not apply_in.drive_id:
        raise ValidationFailed("Drive ID is required").to_http()

    try:
        application = await application_service.apply(db, student.id, apply_in.drive_id)
    except PortalError as e:
        raise e.to_http()

    return ApplicationCreatedResponse(message="Application submitted successfully", id=application.id)


# Declared before /{application_id} so "drive" is never read as an id
@router.get("/drive/{drive_id}", response_model=List[DriveApplicant])
async def list_drive_applicants(
    drive_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    List applications for a drive with each applicant's academic snapshot

    **RBAC**: Admin
    """
    result = await db.execute(
        select(
            Application,
            Student.usn,
            Student.phone,
            User.full_name,
            User.email,
            StudentAcademic.cgpa,
            StudentAcademic.branch,
            StudentAcademic.active_backlogs,
        )
        .join(Student, Application.student_id == Student.id)
        .join(User, Student.user_id == User.id)
        .outerjoin(StudentAcademic, StudentAcademic.student_id == Student.id)
        .where(Application.drive_id == drive_id)
        .order_by(Application.applied_at.desc())
    )

    return [
        DriveApplicant(
            id=application.id,
            status=application.status,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
            usn=usn,
            full_name=full_name,
            email=email,
            phone=phone,
            cgpa=cgpa,
            branch=branch,
            active_backlogs=active_backlogs,
        )
        for application, usn, phone, full_name, email, cgpa, branch, active_backlogs in result.all()
    ]


@router.get("/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: UUID,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Get one of own applications with its status history (newest first)

    **Auth**: Student (JWT required)
    """
    result = await db.execute(
        select(Application, PlacementDrive)
        .join(PlacementDrive, Application.drive_id == PlacementDrive.id)
        .where(Application.id == application_id, Application.student_id == student.id)
    )
    row = result.one_or_none()

    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found"
        )

    application, drive = row

    history_result = await db.execute(
        select(ApplicationStatusHistory)
        .where(ApplicationStatusHistory.application_id == application.id)
        .order_by(ApplicationStatusHistory.changed_at.desc())
    )
    history = [StatusHistoryEntry.model_validate(entry) for entry in history_result.scalars().all()]

    return ApplicationDetail(
        **_summary_fields(application, drive),
        job_description=drive.job_description,
        status_history=history,
    )


@router.delete("/{application_id}", response_model=MessageResponse)
async def withdraw_application(
    application_id: UUID,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Withdraw an application

    **Auth**: Student (JWT required)

    Only allowed while the application is Applied or Shortlisted.
    """
    try:
        await application_service.withdraw(db, student.id, application_id)
    except PortalError as e:
        raise e.to_http()

    return MessageResponse(message="Application withdrawn successfully")


# ==================== Admin ====================

@router.put("/{application_id}/status", response_model=MessageResponse)
async def update_application_status(
    application_id: UUID,
    status_in: StatusUpdateRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Update application status and notify the student

    **RBAC**: Admin

    Selecting a student marks them as placed.
    """
    actor_id = current_user.id
    try:
        await application_service.update_status(
            db,
            application_id,
            status_in.status,
            actor_id=actor_id,
            remarks=status_in.remarks,
        )
    except PortalError as e:
        raise e.to_http()

    return MessageResponse(message="Application status updated successfully")
