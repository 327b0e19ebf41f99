"""Shared fixtures: in-memory SQLite database, API client and seed data."""

from datetime import date, datetime, timedelta
from types import SimpleNamespace
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import Role, create_access_token, get_password_hash
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import (
    Application,
    ApplicationStatusHistory,
    PlacementDrive,
    Student,
    StudentAcademic,
    User,
)
from app.utils.helpers import dump_json_list, utcnow

PASSWORD = "password123"
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class Seed:
    """Creates committed rows and returns plain ids, never live ORM objects."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def admin(self) -> SimpleNamespace:
        n = self._next()
        user = User(
            email=f"admin{n}@college.edu",
            password_hash=PASSWORD_HASH,
            full_name=f"Admin {n}",
            role=Role.ADMIN.value,
        )
        self.session.add(user)
        await self.session.commit()
        return SimpleNamespace(
            user_id=user.id,
            email=user.email,
            token=create_access_token({"sub": str(user.id), "role": Role.ADMIN.value}),
        )

    async def student(
        self,
        cgpa: Optional[float] = 8.0,
        active_backlogs: int = 0,
        branch: str = "CS",
        is_placed: bool = False,
        with_academics: bool = True,
    ) -> SimpleNamespace:
        n = self._next()
        user = User(
            email=f"student{n}@college.edu",
            password_hash=PASSWORD_HASH,
            full_name=f"Student {n}",
            role=Role.STUDENT.value,
        )
        self.session.add(user)
        await self.session.flush()

        student = Student(user_id=user.id, usn=f"1CS21{n:03d}", is_placed=is_placed)
        self.session.add(student)
        await self.session.flush()

        if with_academics:
            self.session.add(
                StudentAcademic(
                    student_id=student.id,
                    cgpa=cgpa,
                    active_backlogs=active_backlogs,
                    branch=branch,
                    batch_year=2025,
                )
            )
        await self.session.commit()
        return SimpleNamespace(
            user_id=user.id,
            student_id=student.id,
            email=user.email,
            usn=student.usn,
            token=create_access_token({"sub": str(user.id), "role": Role.STUDENT.value}),
        )

    async def drive(
        self,
        company_name: str = "Acme Corp",
        role: str = "Software Engineer",
        min_cgpa: Optional[float] = None,
        max_backlogs: Optional[int] = None,
        allowed_branches=None,
        status: str = "Upcoming",
        registration_deadline: Optional[datetime] = None,
        deadline_in: Optional[timedelta] = timedelta(days=7),
        drive_date: Optional[date] = None,
    ):
        if registration_deadline is None and deadline_in is not None:
            registration_deadline = utcnow() + deadline_in
        if isinstance(allowed_branches, list):
            allowed_branches = dump_json_list(allowed_branches)

        drive = PlacementDrive(
            company_name=company_name,
            role=role,
            ctc="12 LPA",
            job_description="Build things",
            min_cgpa=min_cgpa,
            max_backlogs=max_backlogs,
            allowed_branches=allowed_branches,
            drive_date=drive_date or date.today() + timedelta(days=14),
            registration_deadline=registration_deadline,
            status=status,
        )
        self.session.add(drive)
        await self.session.commit()
        return drive.id

    async def application(self, student_id, drive_id, status: str = "Applied"):
        now = utcnow()
        application = Application(
            student_id=student_id,
            drive_id=drive_id,
            status=status,
            applied_at=now,
        )
        self.session.add(application)
        await self.session.flush()
        self.session.add(
            ApplicationStatusHistory(
                application_id=application.id,
                old_status=None,
                new_status=status,
                changed_at=now,
            )
        )
        await self.session.commit()
        return application.id


@pytest.fixture
def seed(db_session):
    return Seed(db_session)
