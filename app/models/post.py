"""Post model for problem/solution write-ups."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Post(Base):
    """A coding problem together with its solution."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    author_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Post Content
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")  # error description
    content = Column(Text, nullable=False)  # solution
    code_snippet = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)

    # Like/helpful counts are never stored here; they are counted from join rows.

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_post_author_created', 'author_user_id', 'created_at'),
    )

    # Relationships
    author = relationship("User", back_populates="posts")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete",
        order_by="Comment.created_at.asc()"
    )
    like_rows = relationship("PostLike", back_populates="post", cascade="all, delete")
    helpful_rows = relationship("PostHelpful", back_populates="post", cascade="all, delete")
    saves = relationship("SavedPost", back_populates="post", cascade="all, delete")
    reports = relationship("Report", back_populates="post", cascade="all, delete")
    notifications = relationship(
        "Notification",
        foreign_keys="Notification.post_id",
        cascade="all, delete"
    )
