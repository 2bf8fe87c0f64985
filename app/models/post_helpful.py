"""PostHelpful model for "helpful" marks on posts."""

from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class PostHelpful(Base):
    """A user's helpful mark on a post."""

    __tablename__ = "post_helpfuls"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())

    # Constraints
    __table_args__ = (
        # One helpful mark per user per post
        UniqueConstraint('user_id', 'post_id', name='uq_post_helpful'),
        Index('idx_post_helpful_post', 'post_id', 'created_at'),
    )

    # Relationships
    post = relationship("Post", back_populates="helpful_rows")
    user = relationship("User", foreign_keys=[user_id])
