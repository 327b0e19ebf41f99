"""
Application Lifecycle Service

Apply, withdraw and admin status updates. Each operation is one transaction:
checks run first, writes happen in a fixed order, and nothing is committed
unless every step succeeds.

Write order for a status update:
    status -> history row -> placed flag (Selected only) -> inbox message -> commit
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BusinessRuleViolation,
    OperationFailed,
    PortalError,
    ResourceNotFound,
    ValidationFailed,
)
from app.models.application import Application, ApplicationStatus, ApplicationStatusHistory
from app.models.drive import OPEN_DRIVE_STATUSES, PlacementDrive
from app.models.inbox import InboxMessage
from app.models.student import Student, StudentAcademic
from app.services.eligibility_service import AcademicSnapshot, DriveConstraints, evaluate
from app.services.notification_service import (
    Notification,
    build_notification,
    build_submission_notification,
)
from app.utils.helpers import utcnow

logger = structlog.get_logger(__name__)

T = TypeVar("T")

VALID_STATUSES = [s.value for s in ApplicationStatus]
WITHDRAWABLE_STATUSES = (ApplicationStatus.APPLIED.value, ApplicationStatus.SHORTLISTED.value)

# Rejection messages
MSG_ALREADY_PLACED = "You are already placed and cannot apply for more drives"
MSG_DRIVE_NOT_FOUND = "Placement drive not found"
MSG_DRIVE_CLOSED = "This drive is no longer accepting applications"
MSG_DEADLINE_PASSED = "Registration deadline has passed"
MSG_ALREADY_APPLIED = "You have already applied for this drive"
MSG_INCOMPLETE_PROFILE = "Please complete your academic profile before applying"
MSG_APPLICATION_NOT_FOUND = "Application not found"
MSG_CANNOT_WITHDRAW = "Cannot withdraw application at this stage"
MSG_STATUS_REQUIRED = "Status is required"
MSG_INVALID_STATUS = "Invalid status"

TransitionPolicy = Callable[[Optional[str], str], bool]


def allow_any_transition(old_status: Optional[str], new_status: str) -> bool:
    """Any recognized status may follow any other."""
    return True


class ApplicationService:
    """
    Owns applications and their status history.

    Args:
        transition_policy: Decides whether old_status -> new_status is allowed
        clock: Returns "now" as a naive UTC datetime
    """

    def __init__(
        self,
        transition_policy: TransitionPolicy = allow_any_transition,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.transition_policy = transition_policy
        self.clock = clock

    # ==================== Operations ====================

    async def apply(self, db: AsyncSession, student_id: UUID, drive_id: UUID) -> Application:
        """Create an Applied application for the student, with history and a confirmation message."""

        async def on_integrity_error() -> None:
            # Lost a race with a concurrent apply for the same pair
            if await self._has_applied(db, student_id, drive_id):
                raise BusinessRuleViolation(MSG_ALREADY_APPLIED)

        return await self._in_transaction(
            db,
            lambda: self._apply(db, student_id, drive_id),
            failure_message="Failed to submit application",
            on_integrity_error=on_integrity_error,
            operation="apply",
            student_id=str(student_id),
            drive_id=str(drive_id),
        )

    async def withdraw(self, db: AsyncSession, student_id: UUID, application_id: UUID) -> None:
        """Delete the student's application while it is still Applied or Shortlisted."""
        await self._in_transaction(
            db,
            lambda: self._withdraw(db, student_id, application_id),
            failure_message="Failed to withdraw application",
            operation="withdraw",
            student_id=str(student_id),
            application_id=str(application_id),
        )

    async def update_status(
        self,
        db: AsyncSession,
        application_id: UUID,
        new_status: Optional[str],
        actor_id: UUID,
        remarks: Optional[str] = None,
    ) -> Application:
        """Move an application to new_status and notify the student (admin only)."""
        if not new_status:
            raise ValidationFailed(MSG_STATUS_REQUIRED)
        if new_status not in VALID_STATUSES:
            raise ValidationFailed(MSG_INVALID_STATUS)

        return await self._in_transaction(
            db,
            lambda: self._update_status(db, application_id, new_status, actor_id, remarks),
            failure_message="Failed to update application status",
            operation="update_status",
            application_id=str(application_id),
            new_status=new_status,
        )

    # ==================== Transaction steps ====================

    async def _apply(self, db: AsyncSession, student_id: UUID, drive_id: UUID) -> Application:
        student = await db.get(Student, student_id)
        if student is None:
            raise ResourceNotFound("Student profile not found")

        # Placed check comes before every drive check
        if student.is_placed:
            raise BusinessRuleViolation(MSG_ALREADY_PLACED)

        drive = await db.get(PlacementDrive, drive_id)
        if drive is None:
            raise ResourceNotFound(MSG_DRIVE_NOT_FOUND)

        if drive.status not in OPEN_DRIVE_STATUSES:
            raise BusinessRuleViolation(MSG_DRIVE_CLOSED)

        now = self.clock()
        if drive.registration_deadline is not None and drive.registration_deadline < now:
            raise BusinessRuleViolation(MSG_DEADLINE_PASSED)

        if await self._has_applied(db, student.id, drive.id):
            raise BusinessRuleViolation(MSG_ALREADY_APPLIED)

        result = await db.execute(
            select(StudentAcademic).where(StudentAcademic.student_id == student.id)
        )
        academics = result.scalar_one_or_none()
        if academics is None or academics.cgpa is None:
            raise BusinessRuleViolation(MSG_INCOMPLETE_PROFILE)

        eligibility = evaluate(
            AcademicSnapshot.from_record(academics),
            DriveConstraints.from_drive(drive),
            stop_at_first=True,
        )
        if not eligibility.eligible:
            raise BusinessRuleViolation(eligibility.reasons[0])

        application = Application(
            student_id=student.id,
            drive_id=drive.id,
            status=ApplicationStatus.APPLIED.value,
            applied_at=now,
            updated_at=now,
        )
        db.add(application)
        await db.flush()

        await self._append_history(
            db, application.id, None, ApplicationStatus.APPLIED.value, student.user_id, None, now
        )
        await self._send_notification(
            db, student.user_id, drive.id, build_submission_notification(drive.company_name), now
        )

        logger.info(
            "application_submitted",
            application_id=str(application.id),
            student_id=str(student.id),
            drive_id=str(drive.id),
        )
        return application

    async def _withdraw(self, db: AsyncSession, student_id: UUID, application_id: UUID) -> None:
        result = await db.execute(
            select(Application).where(
                Application.id == application_id,
                Application.student_id == student_id,
            )
        )
        application = result.scalar_one_or_none()

        # Someone else's application looks the same as a missing one
        if application is None:
            raise ResourceNotFound(MSG_APPLICATION_NOT_FOUND)

        if application.status not in WITHDRAWABLE_STATUSES:
            raise BusinessRuleViolation(MSG_CANNOT_WITHDRAW)

        # History rows go with the application
        await db.delete(application)
        await db.flush()

        logger.info("application_withdrawn", application_id=str(application_id))

    async def _update_status(
        self,
        db: AsyncSession,
        application_id: UUID,
        new_status: str,
        actor_id: UUID,
        remarks: Optional[str],
    ) -> Application:
        result = await db.execute(
            select(Application, PlacementDrive.company_name)
            .join(PlacementDrive, Application.drive_id == PlacementDrive.id)
            .where(Application.id == application_id)
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFound(MSG_APPLICATION_NOT_FOUND)

        application, company_name = row
        old_status = application.status

        if not self.transition_policy(old_status, new_status):
            raise BusinessRuleViolation(
                f"Cannot move application from {old_status} to {new_status}"
            )

        now = self.clock()

        application.status = new_status
        application.updated_at = now
        await db.flush()

        await self._append_history(db, application.id, old_status, new_status, actor_id, remarks, now)

        student = await db.get(Student, application.student_id)
        if new_status == ApplicationStatus.SELECTED.value:
            student.is_placed = True
            await db.flush()

        await self._send_notification(
            db,
            student.user_id,
            application.drive_id,
            build_notification(new_status, company_name, remarks),
            now,
        )

        logger.info(
            "application_status_updated",
            application_id=str(application.id),
            old_status=old_status,
            new_status=new_status,
            actor_id=str(actor_id),
        )
        return application

    # ==================== Helpers ====================

    async def _has_applied(self, db: AsyncSession, student_id: UUID, drive_id: UUID) -> bool:
        result = await db.execute(
            select(Application.id).where(
                Application.student_id == student_id,
                Application.drive_id == drive_id,
            )
        )
        return result.first() is not None

    async def _append_history(
        self,
        db: AsyncSession,
        application_id: UUID,
        old_status: Optional[str],
        new_status: str,
        actor_id: Optional[UUID],
        remarks: Optional[str],
        now: datetime,
    ) -> None:
        db.add(
            ApplicationStatusHistory(
                application_id=application_id,
                old_status=old_status,
                new_status=new_status,
                changed_by=actor_id,
                remarks=remarks,
                changed_at=now,
            )
        )
        await db.flush()

    async def _send_notification(
        self,
        db: AsyncSession,
        recipient_id: UUID,
        drive_id: UUID,
        notification: Notification,
        now: datetime,
    ) -> None:
        db.add(
            InboxMessage(
                recipient_id=recipient_id,
                subject=notification.subject,
                message=notification.body,
                message_type=notification.category,
                related_drive_id=drive_id,
                sent_at=now,
            )
        )
        await db.flush()

    async def _in_transaction(
        self,
        db: AsyncSession,
        work: Callable[[], Awaitable[T]],
        failure_message: str,
        on_integrity_error: Optional[Callable[[], Awaitable[None]]] = None,
        **log_context,
    ) -> T:
        """Run work and commit; roll back on any error."""
        try:
            result = await work()
            await db.commit()
            return result
        except PortalError as e:
            await db.rollback()
            logger.info("application_request_rejected", reason=e.message, **log_context)
            raise
        except IntegrityError as e:
            await db.rollback()
            if on_integrity_error is not None:
                try:
                    await on_integrity_error()
                except PortalError as rejection:
                    logger.info("application_request_rejected", reason=rejection.message, **log_context)
                    raise
            logger.error("application_operation_failed", error=str(e), exc_info=True, **log_context)
            raise OperationFailed(failure_message) from e
        except Exception as e:
            await db.rollback()
            logger.error("application_operation_failed", error=str(e), exc_info=True, **log_context)
            raise OperationFailed(failure_message) from e


# Singleton instance
application_service = ApplicationService()
