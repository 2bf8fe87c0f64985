"""CommentLike model for comment likes."""

from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class CommentLike(Base):
    """A user's like on a comment."""

    __tablename__ = "comment_likes"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    comment_id = Column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
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
        UniqueConstraint('user_id', 'comment_id', name='uq_comment_like'),
    )

    # Relationships
    comment = relationship("Comment", back_populates="like_rows")
    user = relationship("User", foreign_keys=[user_id])
