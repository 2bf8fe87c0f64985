"""
SQLAlchemy Models for DevForum
"""

from ..database import Base
from .user import User
from .post import Post
from .comment import Comment
from .post_like import PostLike
from .post_helpful import PostHelpful
from .comment_like import CommentLike
from .comment_helpful import CommentHelpful
from .saved_post import SavedPost
from .report import Report
from .notification import Notification

# Export all models
__all__ = [
    "Base",
    "User",
    "Post",
    "Comment",
    "PostLike",
    "PostHelpful",
    "CommentLike",
    "CommentHelpful",
    "SavedPost",
    "Report",
    "Notification",
]
