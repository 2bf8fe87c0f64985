"""PostLike model for post likes."""

from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class PostLike(Base):
    """A user's like on a post."""

    __tablename__ = "post_likes"

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
        # One like per user per post
        UniqueConstraint('user_id', 'post_id', name='uq_post_like'),
        Index('idx_post_like_post', 'post_id', 'created_at'),
    )

    # Relationships
    post = relationship("Post", back_populates="like_rows")
    user = relationship("User", foreign_keys=[user_id])
