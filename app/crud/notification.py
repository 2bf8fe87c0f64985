"""CRUD operations for `Notification` model."""

from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate, NotificationUpdate


class CRUDNotification(CRUDBase[Notification, NotificationCreate, NotificationUpdate]):
    def get_by_user(
        self, db: Session, *, user_id: int, unread_only: bool = False
    ) -> List[Notification]:
        """Get notifications for a specific user, newest first, optionally unread only."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .options(selectinload(Notification.from_user))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        return list(db.scalars(stmt).all())

    def get_unread_count(self, db: Session, *, user_id: int) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read == False,  # noqa: E712
        )
        return db.scalar(stmt) or 0

    def mark_as_read(self, db: Session, *, notification: Notification) -> Notification:
        """Mark a notification as read."""
        notification.is_read = True
        notification.read_at = datetime.utcnow()

        try:
            db.add(notification)
            db.commit()
            db.refresh(notification)
        except Exception:
            db.rollback()
            raise
        return notification

    def mark_all_read(self, db: Session, *, user_id: int) -> int:
        """Mark all notifications for a user as read.

        Returns the number of notifications marked.
        """
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .values(is_read=True, read_at=datetime.utcnow())
        )
        try:
            count = db.execute(stmt).rowcount
            db.commit()
        except Exception:
            db.rollback()
            raise
        return count


# Singleton instance
crud_notification = CRUDNotification(Notification)
