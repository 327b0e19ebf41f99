"""
Placement Drives API
- Student: browse drives with per-drive eligibility
- Admin: create, update and delete drives
"""

from typing import List, Optional, Set
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_admin
from app.config import settings
from app.core.security import Role
from app.models.application import Application
from app.models.drive import DriveStatus, PlacementDrive
from app.models.student import Student, StudentAcademic
from app.models.user import User
from app.schemas.application import MessageResponse
from app.schemas.drive import (
    DriveCreate,
    DriveCreatedResponse,
    DrivePreview,
    DriveResponse,
    DriveUpdate,
    DriveWithEligibility,
)
from app.services.eligibility_service import AcademicSnapshot, DriveConstraints, evaluate
from app.utils.helpers import dump_json_list, utcnow

logger = structlog.get_logger(__name__)

router = APIRouter()

DRIVE_COLUMNS = (
    "id", "company_name", "role", "company_type", "ctc", "job_description",
    "min_cgpa", "max_backlogs", "allowed_branches", "drive_date",
    "registration_deadline", "status", "created_at",
)


def _drive_fields(drive: PlacementDrive) -> dict:
    return {column: getattr(drive, column) for column in DRIVE_COLUMNS}


async def _get_student(db: AsyncSession, user: User) -> Optional[Student]:
    result = await db.execute(select(Student).where(Student.user_id == user.id))
    return result.scalar_one_or_none()


async def _applied_drive_ids(db: AsyncSession, student_id: UUID) -> Set[UUID]:
    result = await db.execute(
        select(Application.drive_id).where(Application.student_id == student_id)
    )
    return {row[0] for row in result.fetchall()}


async def _get_drive_or_404(db: AsyncSession, drive_id: UUID) -> PlacementDrive:
    drive = await db.get(PlacementDrive, drive_id)
    if not drive:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Placement drive not found"
        )
    return drive


# ==================== Student views ====================

@router.get("", response_model=List[DriveWithEligibility])
async def list_drives(
    drive_status: Optional[DriveStatus] = Query(None, alias="status", description="Filter by drive status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List placement drives with eligibility

    **Auth**: JWT required

    Every failing rule is reported in `eligibility_reasons`. Admins get the
    list without eligibility.
    """
    query = select(PlacementDrive)
    if drive_status:
        query = query.where(PlacementDrive.status == drive_status.value)
    query = query.order_by(PlacementDrive.drive_date.desc())

    result = await db.execute(query)
    drives = result.scalars().all()

    if current_user.role == Role.ADMIN.value:
        return [
            DriveWithEligibility(**_drive_fields(drive), eligible=None)
            for drive in drives
        ]

    student = await _get_student(db, current_user)
    academics = None
    if student:
        result = await db.execute(
            select(StudentAcademic).where(StudentAcademic.student_id == student.id)
        )
        academics = result.scalar_one_or_none()

    if not academics:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Academic information not found. Please complete your profile."
        )

    snapshot = AcademicSnapshot.from_record(academics)
    applied = await _applied_drive_ids(db, student.id)

    response = []
    for drive in drives:
        has_applied = drive.id in applied
        eligibility = evaluate(
            snapshot,
            DriveConstraints.from_drive(drive),
            already_applied=has_applied,
            already_placed=student.is_placed,
        )
        response.append(DriveWithEligibility(
            **_drive_fields(drive),
            has_applied=has_applied,
            eligible=eligibility.eligible,
            eligibility_reasons=eligibility.reasons or None,
        ))

    return response


@router.get("/upcoming/preview", response_model=List[DrivePreview])
async def upcoming_drives(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Upcoming drives still open for registration (dashboard widget)

    **Auth**: JWT required
    """
    result = await db.execute(
        select(PlacementDrive)
        .where(
            PlacementDrive.status == DriveStatus.UPCOMING.value,
            PlacementDrive.registration_deadline > utcnow(),
        )
        .order_by(PlacementDrive.drive_date.asc())
        .limit(settings.UPCOMING_DRIVES_PREVIEW_LIMIT)
    )
    return [DrivePreview.model_validate(drive) for drive in result.scalars().all()]


@router.get("/{drive_id}", response_model=DriveResponse)
async def get_drive(
    drive_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get drive details

    **Auth**: JWT required
    """
    drive = await _get_drive_or_404(db, drive_id)

    has_applied = False
    student = await _get_student(db, current_user)
    if student:
        has_applied = drive.id in await _applied_drive_ids(db, student.id)

    return DriveResponse(**_drive_fields(drive), has_applied=has_applied)


# ==================== Admin ====================

@router.post("", response_model=DriveCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_drive(
    drive_in: DriveCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a placement drive

    **RBAC**: Admin

    New drives start as Upcoming.
    """
    if not drive_in.company_name or not drive_in.role or not drive_in.drive_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company name, role, and drive date are required"
        )

    drive = PlacementDrive(
        company_name=drive_in.company_name,
        role=drive_in.role,
        company_type=drive_in.company_type or "Service",
        ctc=drive_in.ctc,
        job_description=drive_in.job_description,
        min_cgpa=drive_in.min_cgpa,
        max_backlogs=drive_in.max_backlogs,
        allowed_branches=dump_json_list(drive_in.allowed_branches),
        drive_date=drive_in.drive_date,
        registration_deadline=drive_in.registration_deadline,
        status=DriveStatus.UPCOMING.value,
        created_by=current_user.id,
    )
    db.add(drive)
    await db.commit()

    logger.info("drive_created", drive_id=str(drive.id), company=drive.company_name)
    return DriveCreatedResponse(message="Placement drive created successfully", id=drive.id)


@router.put("/{drive_id}", response_model=DriveResponse)
async def update_drive(
    drive_id: UUID,
    drive_update: DriveUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a placement drive

    **RBAC**: Admin

    Omitted or null fields keep their current value.
    """
    drive = await _get_drive_or_404(db, drive_id)

    update_data = drive_update.model_dump(exclude_unset=True, exclude_none=True)
    if "allowed_branches" in update_data:
        update_data["allowed_branches"] = dump_json_list(update_data["allowed_branches"])
    if "status" in update_data:
        update_data["status"] = DriveStatus(update_data["status"]).value

    for field, value in update_data.items():
        setattr(drive, field, value)

    await db.commit()

    logger.info("drive_updated", drive_id=str(drive.id), fields=sorted(update_data))
    return DriveResponse(**_drive_fields(drive))


@router.delete("/{drive_id}", response_model=MessageResponse)
async def delete_drive(
    drive_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a placement drive together with its applications

    **RBAC**: Admin
    """
    drive = await _get_drive_or_404(db, drive_id)

    await db.delete(drive)
    await db.commit()

    logger.info("drive_deleted", drive_id=str(drive_id))
    return MessageResponse(message="Placement drive deleted successfully")
