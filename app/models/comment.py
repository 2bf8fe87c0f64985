"""Comment model for post comments and replies."""

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Comment(Base):
    """Comment on a post; ``parent_comment_id`` makes it a reply."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    author_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    parent_comment_id = Column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )  # One level of nesting by convention, not enforced

    # Comment Content
    content = Column(Text, nullable=False)
    image_url = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_comment_post', 'post_id', 'created_at'),
        Index('idx_comment_author', 'author_user_id', 'created_at'),
    )

    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", foreign_keys=[author_user_id])
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship("Comment", back_populates="parent", cascade="all, delete")
    like_rows = relationship("CommentLike", back_populates="comment", cascade="all, delete")
    helpful_rows = relationship("CommentHelpful", back_populates="comment", cascade="all, delete")
    notifications = relationship(
        "Notification",
        foreign_keys="Notification.comment_id",
        cascade="all, delete"
    )
