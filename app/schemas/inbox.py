"""Inbox schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.inbox import MessageType


class InboxMessageResponse(BaseModel):
    id: UUID
    subject: str
    message: str
    message_type: str
    is_read: bool
    action_url: Optional[str] = None
    sent_at: datetime
    read_at: Optional[datetime] = None
    related_drive_id: Optional[UUID] = None
    company_name: Optional[str] = None
    role: Optional[str] = None


class InboxPreviewItem(BaseModel):
    id: UUID
    subject: str
    message_type: str
    is_read: bool
    sent_at: datetime
    company_name: Optional[str] = None


class UnreadCountResponse(BaseModel):
    count: int


class SendMessageRequest(BaseModel):
    recipient_id: Optional[UUID] = None
    subject: Optional[str] = Field(None, max_length=255)
    message: Optional[str] = None
    message_type: MessageType = MessageType.NOTIFICATION
    related_drive_id: Optional[UUID] = None
    action_url: Optional[str] = Field(None, max_length=500)


class SendBulkMessageRequest(BaseModel):
    recipient_ids: Optional[List[UUID]] = None
    subject: Optional[str] = Field(None, max_length=255)
    message: Optional[str] = None
    message_type: MessageType = MessageType.NOTIFICATION
    related_drive_id: Optional[UUID] = None
    action_url: Optional[str] = Field(None, max_length=500)


class SendMessageResponse(BaseModel):
    message: str
    id: Optional[UUID] = None
    recipients: int = 1
