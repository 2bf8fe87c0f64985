"""Notification outbox for DevForum.

Handlers enqueue notifications while serving a request; the outbox is
flushed as a background task once the response has been produced. A
failed delivery is logged and never undoes the mutation that triggered it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.crud.notification import crud_notification
from app.database import SessionLocal
from app.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)


@dataclass
class PendingNotification:
    recipient_user_id: int
    actor_user_id: Optional[int]
    notification_type: str
    message: str
    post_id: Optional[int] = None
    comment_id: Optional[int] = None


class NotificationOutbox:
    """Per-request queue of notifications awaiting delivery."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        max_attempts: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.max_attempts = max_attempts or settings.NOTIFICATION_MAX_ATTEMPTS
        self.pending: List[PendingNotification] = []

    def enqueue(
        self,
        *,
        recipient_user_id: Optional[int],
        actor_user_id: Optional[int],
        notification_type: str,
        message: str,
        post_id: Optional[int] = None,
        comment_id: Optional[int] = None,
    ) -> bool:
        """Queue a notification. Returns False when it was suppressed."""
        if recipient_user_id is None:
            return False
        if recipient_user_id == actor_user_id:
            logger.debug(f"[NOTIFY] Skipping self-notification for user {actor_user_id}")
            return False

        self.pending.append(
            PendingNotification(
                recipient_user_id=recipient_user_id,
                actor_user_id=actor_user_id,
                notification_type=notification_type,
                message=message,
                post_id=post_id,
                comment_id=comment_id,
            )
        )
        return True

    def _deliver(self, item: PendingNotification) -> bool:
        try:
            payload = NotificationCreate(
                user_id=item.recipient_user_id,
                notification_type=item.notification_type,
                message=item.message,
                post_id=item.post_id,
                comment_id=item.comment_id,
                from_user_id=item.actor_user_id,
            )
        except ValidationError as e:
            logger.error(f"[NOTIFY] Dropping malformed {item.notification_type} notification: {e}")
            return False

        for attempt in range(1, self.max_attempts + 1):
            db = self.session_factory()
            try:
                crud_notification.create(db, obj_in=payload)
                return True
            except SQLAlchemyError as e:
                logger.warning(
                    f"[NOTIFY] Attempt {attempt}/{self.max_attempts} failed for "
                    f"{item.notification_type} -> user {item.recipient_user_id}: {e}"
                )
            finally:
                db.close()

        logger.error(
            f"[NOTIFY] Giving up on {item.notification_type} notification for "
            f"user {item.recipient_user_id} after {self.max_attempts} attempts"
        )
        return False

    def flush(self) -> int:
        """Write every queued notification in its own session.

        Returns:
            Number of notifications delivered
        """
        items, self.pending = self.pending, []
        delivered = sum(1 for item in items if self._deliver(item))
        if items:
            logger.info(f"[NOTIFY] Delivered {delivered}/{len(items)} notifications")
        return delivered


def describe_interaction(actor_name: Optional[str], notification_type: str) -> str:
    """Human-readable message for an interaction notification."""
    who = actor_name or "Someone"
    messages = {
        "like": f"{who} liked your post.",
        "helpful": f"{who} marked your post as helpful.",
        "comment": f"{who} commented on your post.",
        "comment_like": f"{who} liked your comment.",
        "comment_helpful": f"{who} marked your comment as helpful.",
    }
    return messages.get(notification_type, f"{who} interacted with your content.")
