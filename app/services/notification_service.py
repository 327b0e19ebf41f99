"""
Notification Service
Builds inbox messages for application events.

Templating only: the lifecycle service inserts the resulting rows inside its
own transaction, so a notification is never committed without its status change.
"""

from typing import NamedTuple, Optional

from app.models.application import ApplicationStatus
from app.models.inbox import MessageType


class Notification(NamedTuple):
    subject: str
    body: str
    category: str


# (subject template, body template, default remarks)
STATUS_TEMPLATES = {
    ApplicationStatus.SHORTLISTED.value: (
        "Shortlisted - {company}",
        "Congratulations! You have been shortlisted for {company}. {remarks}",
        "Further details will be shared soon.",
    ),
    ApplicationStatus.EXAM_SCHEDULED.value: (
        "Exam Scheduled - {company}",
        "Your online exam for {company} has been scheduled. {remarks}",
        "Check your email for details.",
    ),
    ApplicationStatus.INTERVIEW_SCHEDULED.value: (
        "Interview Scheduled - {company}",
        "Your interview for {company} has been scheduled. {remarks}",
        "Check your email for details.",
    ),
    ApplicationStatus.SELECTED.value: (
        "Congratulations! Selected at {company}",
        "Congratulations! You have been selected for {company}. {remarks}",
        "Further details will be communicated soon.",
    ),
    ApplicationStatus.REJECTED.value: (
        "Application Update - {company}",
        "Thank you for your interest in {company}. {remarks}",
        "Unfortunately, we are unable to proceed with your application at this time.",
    ),
}

DEFAULT_TEMPLATE = (
    "Application Update - {company}",
    "Your application status has been updated. {remarks}",
    "",
)

CATEGORY_BY_STATUS = {
    ApplicationStatus.SHORTLISTED.value: MessageType.SHORTLIST.value,
    ApplicationStatus.SELECTED.value: MessageType.RESULT.value,
}


def build_notification(status: str, company_name: str, remarks: Optional[str] = None) -> Notification:
    """Inbox message for a status transition. Unknown statuses get a generic update."""
    subject_tpl, body_tpl, default_remarks = STATUS_TEMPLATES.get(status, DEFAULT_TEMPLATE)
    subject = subject_tpl.format(company=company_name)
    body = body_tpl.format(company=company_name, remarks=remarks or default_remarks).rstrip()
    category = CATEGORY_BY_STATUS.get(status, MessageType.NOTIFICATION.value)
    return Notification(subject=subject, body=body, category=category)


def build_submission_notification(company_name: str) -> Notification:
    """Confirmation sent when an application is created."""
    return Notification(
        subject=f"Application Submitted - {company_name}",
        body=(
            f"Your application for {company_name} has been successfully submitted. "
            "You will be notified about further updates."
        ),
        category=MessageType.NOTIFICATION.value,
    )
