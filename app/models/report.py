"""Report model for abuse reports on posts."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, CheckConstraint, Index, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


REPORT_STATUSES = ("pending", "resolved", "ignored")


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)

    # Reporter and reported post
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    reason = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'resolved', 'ignored')",
            name="check_report_status"
        ),
        # At most one pending report per user per post
        Index(
            "uq_report_pending_user_post",
            "user_id",
            "post_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    # Relationships
    post = relationship("Post", back_populates="reports")
    user = relationship("User", foreign_keys=[user_id])
