from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, ForeignKey, Text, CheckConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


NOTIFICATION_TYPES = ("like", "helpful", "comment", "comment_like", "comment_helpful")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)

    # Recipient
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Notification Content
    notification_type = Column(String(50), nullable=False, index=True)
    message = Column(Text, nullable=False)

    # Origin
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True, index=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    from_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Status
    is_read = Column(Boolean, default=False, index=True)
    read_at = Column(TIMESTAMP)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)

    # Constraints and Indexes
    __table_args__ = (
        CheckConstraint(
            "notification_type IN ('like', 'helpful', 'comment', 'comment_like', 'comment_helpful')",
            name="check_notification_type"
        ),
        Index("ix_notifications_user_unread", "user_id", "is_read", "created_at"),
    )

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    from_user = relationship("User", foreign_keys=[from_user_id])
