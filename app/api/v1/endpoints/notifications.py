"""Notification endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_current_user_id, get_db
from app.core.exceptions import ForbiddenException, NotFoundException
from app.crud import crud_notification
from app.models.user import User
from app.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


@router.get(
    "",
    response_model=List[NotificationResponse],
    status_code=status.HTTP_200_OK,
    summary="List my notifications",
    description="""
    Newest first. Anonymous callers and failed lookups get an empty list.
    """,
)
def list_notifications(
    unread_only: bool = Query(False, description="Only return unread notifications"),
    user_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[NotificationResponse]:
    if user_id is None:
        return []
    try:
        notifications = crud_notification.get_by_user(db, user_id=user_id, unread_only=unread_only)
    except SQLAlchemyError as e:
        logger.error(f"[NOTIFY] Failed to load notifications for user {user_id}: {e}")
        return []
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    status_code=status.HTTP_200_OK,
    summary="Count my unread notifications",
)
def get_unread_count(
    user_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> UnreadCountResponse:
    if user_id is None:
        return UnreadCountResponse(unread_count=0)
    try:
        count = crud_notification.get_unread_count(db, user_id=user_id)
    except SQLAlchemyError as e:
        logger.error(f"[NOTIFY] Failed to count notifications for user {user_id}: {e}")
        count = 0
    return UnreadCountResponse(unread_count=count)


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark one notification as read",
)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    notification = crud_notification.get(db, notification_id)
    if not notification:
        raise NotFoundException("Notification not found")
    if notification.user_id != current_user.id:
        raise ForbiddenException("Not authorized to access this notification")

    notification = crud_notification.mark_as_read(db, notification=notification)
    return NotificationResponse.model_validate(notification)


@router.post(
    "/mark-all-read",
    response_model=MarkAllReadResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark all my notifications as read",
)
def mark_all_read(
    user_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> MarkAllReadResponse:
    if user_id is None:
        return MarkAllReadResponse(success=True, read_count=0)
    count = crud_notification.mark_all_read(db, user_id=user_id)
    logger.info(f"[NOTIFY] User {user_id} marked {count} notifications as read")
    return MarkAllReadResponse(success=True, read_count=count)
