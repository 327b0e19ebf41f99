"""
Inbox models
Messages delivered to a user's in-app inbox
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid

from app.db.base import Base
from app.utils.helpers import utcnow


class MessageType(str, enum.Enum):
    """Inbox message categories used for filtering."""
    NOTIFICATION = "Notification"
    SHORTLIST = "Shortlist"
    RESULT = "Result"
    REMINDER = "Reminder"
    ANNOUNCEMENT = "Announcement"


class InboxMessage(Base):
    """A single inbox message."""

    __tablename__ = "inbox_messages"

    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)  # NULL = system

    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    message_type = Column(String(30), default=MessageType.NOTIFICATION.value, nullable=False)

    related_drive_id = Column(Uuid(as_uuid=True), ForeignKey("placement_drives.id", ondelete="SET NULL"), nullable=True)
    action_url = Column(String(500), nullable=True)

    # Status
    is_read = Column(Boolean, default=False, nullable=False)
    sent_at = Column(DateTime, default=utcnow, nullable=False)
    read_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_inbox_recipient", "recipient_id"),
        Index("idx_inbox_recipient_unread", "recipient_id", "is_read"),
        Index("idx_inbox_sent_at", "sent_at"),
    )

    def __repr__(self):
        return f"<InboxMessage(recipient_id={self.recipient_id}, type={self.message_type}, read={self.is_read})>"
