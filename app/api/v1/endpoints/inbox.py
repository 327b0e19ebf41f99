"""
Inbox API
Students read the notifications written by the application lifecycle;
admins send direct or bulk messages
"""

from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_admin
from app.config import settings
from app.models.drive import PlacementDrive
from app.models.inbox import InboxMessage
from app.models.user import User
from app.schemas.application import MessageResponse
from app.schemas.inbox import (
    InboxMessageResponse,
    InboxPreviewItem,
    SendBulkMessageRequest,
    SendMessageRequest,
    SendMessageResponse,
    UnreadCountResponse,
)
from app.utils.helpers import utcnow

logger = structlog.get_logger(__name__)

router = APIRouter()


def _message_query(user: User):
    return (
        select(InboxMessage, PlacementDrive.company_name, PlacementDrive.role)
        .outerjoin(PlacementDrive, InboxMessage.related_drive_id == PlacementDrive.id)
        .where(InboxMessage.recipient_id == user.id)
    )


def _to_response(message: InboxMessage, company_name, role) -> InboxMessageResponse:
    return InboxMessageResponse(
        id=message.id,
        subject=message.subject,
        message=message.message,
        message_type=message.message_type,
        is_read=message.is_read,
        action_url=message.action_url,
        sent_at=message.sent_at,
        read_at=message.read_at,
        related_drive_id=message.related_drive_id,
        company_name=company_name,
        role=role,
    )


def _message_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Message not found"
    )


async def _set_read(db: AsyncSession, user: User, message_id: UUID, is_read: bool) -> None:
    result = await db.execute(
        update(InboxMessage)
        .where(InboxMessage.id == message_id, InboxMessage.recipient_id == user.id)
        .values(is_read=is_read, read_at=utcnow() if is_read else None)
    )
    if result.rowcount == 0:
        raise _message_not_found()
    await db.commit()


# ==================== Student ====================

@router.get("", response_model=List[InboxMessageResponse])
async def list_messages(
    unread_only: bool = Query(False, description="Only unread messages"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List own inbox messages, newest first

    **Auth**: JWT required
    """
    query = _message_query(current_user)
    if unread_only:
        query = query.where(InboxMessage.is_read.is_(False))
    query = query.order_by(InboxMessage.sent_at.desc())

    result = await db.execute(query)
    return [_to_response(*row) for row in result.all()]


@router.get("/unread/count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Count of unread messages

    **Auth**: JWT required
    """
    result = await db.execute(
        select(func.count(InboxMessage.id)).where(
            InboxMessage.recipient_id == current_user.id,
            InboxMessage.is_read.is_(False),
        )
    )
    return UnreadCountResponse(count=result.scalar() or 0)


@router.get("/preview", response_model=List[InboxPreviewItem])
async def inbox_preview(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Most recent messages for the dashboard

    **Auth**: JWT required
    """
    result = await db.execute(
        _message_query(current_user)
        .order_by(InboxMessage.sent_at.desc())
        .limit(settings.INBOX_PREVIEW_LIMIT)
    )
    return [
        InboxPreviewItem(
            id=message.id,
            subject=message.subject,
            message_type=message.message_type,
            is_read=message.is_read,
            sent_at=message.sent_at,
            company_name=company_name,
        )
        for message, company_name, _ in result.all()
    ]


@router.get("/{message_id}", response_model=InboxMessageResponse)
async def get_message(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Open a message. Marks it read the first time.

    **Auth**: JWT required
    """
    result = await db.execute(_message_query(current_user).where(InboxMessage.id == message_id))
    row = result.one_or_none()
    if not row:
        raise _message_not_found()

    message, company_name, role = row
    if not message.is_read:
        message.is_read = True
        message.read_at = utcnow()
        await db.commit()

    return _to_response(message, company_name, role)


@router.put("/{message_id}/read", response_model=MessageResponse)
async def mark_as_read(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark a message as read"""
    await _set_read(db, current_user, message_id, True)
    return MessageResponse(message="Message marked as read")


@router.put("/{message_id}/unread", response_model=MessageResponse)
async def mark_as_unread(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark a message as unread"""
    await _set_read(db, current_user, message_id, False)
    return MessageResponse(message="Message marked as unread")


@router.delete("/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a message"""
    result = await db.execute(
        select(InboxMessage).where(
            InboxMessage.id == message_id,
            InboxMessage.recipient_id == current_user.id,
        )
    )
    message = result.scalar_one_or_none()
    if not message:
        raise _message_not_found()

    await db.delete(message)
    await db.commit()
    return MessageResponse(message="Message deleted successfully")


# ==================== Admin ====================

@router.post("/send", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_in: SendMessageRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a message to one user

    **RBAC**: Admin
    """
    if not message_in.recipient_id or not message_in.subject or not message_in.message:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Recipient, subject, and message are required"
        )

    recipient = await db.get(User, message_in.recipient_id)
    if not recipient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recipient not found"
        )

    message = InboxMessage(
        recipient_id=message_in.recipient_id,
        sender_id=current_user.id,
        subject=message_in.subject,
        message=message_in.message,
        message_type=message_in.message_type.value,
        related_drive_id=message_in.related_drive_id,
        action_url=message_in.action_url,
    )
    db.add(message)
    await db.commit()

    return SendMessageResponse(message="Message sent successfully", id=message.id)


@router.post("/send-bulk", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_bulk_message(
    message_in: SendBulkMessageRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Send the same message to many users in one transaction

    **RBAC**: Admin
    """
    if not message_in.recipient_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Recipient IDs array is required"
        )
    if not message_in.subject or not message_in.message:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subject and message are required"
        )

    recipient_ids = list(dict.fromkeys(message_in.recipient_ids))
    sender_id = current_user.id

    try:
        db.add_all([
            InboxMessage(
                recipient_id=recipient_id,
                sender_id=sender_id,
                subject=message_in.subject,
                message=message_in.message,
                message_type=message_in.message_type.value,
                related_drive_id=message_in.related_drive_id,
                action_url=message_in.action_url,
            )
            for recipient_id in recipient_ids
        ])
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error("bulk_message_failed", recipients=len(recipient_ids), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send bulk messages"
        )

    logger.info("bulk_message_sent", sender_id=str(sender_id), recipients=len(recipient_ids))
    return SendMessageResponse(
        message=f"Messages sent successfully to {len(recipient_ids)} recipients",
        recipients=len(recipient_ids),
    )
