"""
API Dependencies
Common dependencies for API endpoints (authentication, authorization, etc.)
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Role, get_current_user, require_role
from app.db.session import get_db
from app.models.student import Student
from app.models.user import User

__all__ = ["get_db", "get_current_user", "require_admin", "get_current_student"]


# Admin-only routes
require_admin = require_role(Role.ADMIN)


async def get_current_student(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Student:
    """
    Get the student profile of the current user
    """
    result = await db.execute(select(Student).where(Student.user_id == current_user.id))
    student = result.scalar_one_or_none()

    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student profile not found"
        )

    return student
