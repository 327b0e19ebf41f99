"""
Academic Profile API
Students maintain the academic record that drive eligibility is checked against
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_student, get_db
from app.models.student import Student, StudentAcademic
from app.models.user import User
from app.schemas.student import AcademicProfileResponse, AcademicProfileUpdate

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _load_profile(db: AsyncSession, student: Student):
    result = await db.execute(
        select(StudentAcademic, User.full_name)
        .join(User, User.id == student.user_id)
        .where(StudentAcademic.student_id == student.id)
    )
    row = result.one_or_none()
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Academic information not found. Please complete your profile."
        )
    return row


def _to_response(student: Student, academics: StudentAcademic, full_name: str) -> AcademicProfileResponse:
    return AcademicProfileResponse(
        usn=student.usn,
        full_name=full_name,
        cgpa=academics.cgpa,
        active_backlogs=academics.active_backlogs,
        branch=academics.branch,
        batch_year=academics.batch_year,
        is_placed=student.is_placed,
    )


@router.get("/academics", response_model=AcademicProfileResponse)
async def get_academic_profile(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Get own academic record

    **Auth**: Student (JWT required)
    """
    academics, full_name = await _load_profile(db, student)
    return _to_response(student, academics, full_name)


@router.put("/academics", response_model=AcademicProfileResponse)
async def update_academic_profile(
    update: AcademicProfileUpdate,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Update own academic record

    **Auth**: Student (JWT required)

    Only provided fields are updated. The placed flag is not editable here.
    """
    academics, full_name = await _load_profile(db, student)

    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    for field, value in update_data.items():
        setattr(academics, field, value)

    await db.commit()

    logger.info("academic_profile_updated", student_id=str(student.id), fields=sorted(update_data))
    return _to_response(student, academics, full_name)
