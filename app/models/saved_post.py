"""SavedPost model for bookmarked posts."""

from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class SavedPost(Base):
    __tablename__ = "saved_posts"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)

    __table_args__ = (
        UniqueConstraint('user_id', 'post_id', name='uq_saved_post'),
    )

    # Relationships
    post = relationship("Post", back_populates="saves")
    user = relationship("User", foreign_keys=[user_id])
