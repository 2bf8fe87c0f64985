"""CRUD operations package - exports singleton instances for all models."""

from .base import CRUDBase
from .user import crud_user
from .post import crud_post
from .comment import crud_comment
from .interaction import (
    CRUDToggle,
    crud_post_like,
    crud_post_helpful,
    crud_comment_like,
    crud_comment_helpful,
)
from .saved_post import crud_saved_post
from .report import crud_report, DuplicatePendingReport
from .notification import crud_notification


__all__ = [
    # Base
    "CRUDBase",
    "CRUDToggle",
    # CRUD instances
    "crud_user",
    "crud_post",
    "crud_comment",
    "crud_post_like",
    "crud_post_helpful",
    "crud_comment_like",
    "crud_comment_helpful",
    "crud_saved_post",
    "crud_report",
    "crud_notification",
    # Errors
    "DuplicatePendingReport",
]
