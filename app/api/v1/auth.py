"""Authentication endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import (
    Role,
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from app.db.session import get_db
from app.models.student import Student, StudentAcademic
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _is_placed(db: AsyncSession, user: User) -> bool:
    result = await db.execute(select(Student.is_placed).where(Student.user_id == user.id))
    return bool(result.scalar_one_or_none())


async def _find_existing_user(db: AsyncSession, email: str, usn: str):
    result = await db.execute(
        select(User.id)
        .outerjoin(Student, Student.user_id == User.id)
        .where(or_(User.email == email, Student.usn == usn))
    )
    return result.first()


def _user_response(user: User, is_placed: bool) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        is_active=user.is_active,
        is_placed=is_placed,
        created_at=user.created_at,
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new student with an empty academic record."""
    # Check if user already exists
    if await _find_existing_user(db, request.email, request.usn) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this USN or email already exists",
        )

    try:
        user = User(
            email=request.email,
            password_hash=get_password_hash(request.password),
            full_name=request.full_name,
            role=Role.STUDENT.value,
        )
        db.add(user)
        await db.flush()

        student = Student(user_id=user.id, usn=request.usn, phone=request.phone)
        db.add(student)
        await db.flush()

        db.add(
            StudentAcademic(
                student_id=student.id,
                branch=request.branch,
                batch_year=request.batch_year,
                active_backlogs=0,
            )
        )
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same USN or email
        await db.rollback()
        logger.info("registration_duplicate", email=request.email, usn=request.usn)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this USN or email already exists",
        )
    except SQLAlchemyError:
        await db.rollback()
        logger.error("registration_failed", email=request.email, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed. Please try again.",
        )

    logger.info("student_registered", user_id=str(user.id), usn=request.usn)

    return RegisterResponse(
        message="Registration successful. Please login.",
        usn=request.usn,
        email=request.email,
        full_name=request.full_name,
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    # Find user
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(request.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Your account has been deactivated. Please contact admin.",
        )

    access_token = create_access_token({"sub": str(user.id), "role": user.role})

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=_user_response(user, await _is_placed(db, user)),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Current user with the placed flag from the student profile."""
    return _user_response(current_user, await _is_placed(db, current_user))
