"""CRUD operations for Comment."""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.comment import Comment


class CRUDComment(CRUDBase[Comment, dict, dict]):
    """CRUD operations for Comment."""

    def create_comment(
        self,
        db: Session,
        *,
        post_id: int,
        author_user_id: int,
        content: str,
        parent_comment_id: Optional[int] = None,
        image_url: Optional[str] = None
    ) -> Comment:
        """Create a comment or, with ``parent_comment_id``, a reply.

        The caller is expected to have checked that the post exists and that
        the parent belongs to it.
        """
        comment = Comment(
            post_id=post_id,
            author_user_id=author_user_id,
            content=content,
            parent_comment_id=parent_comment_id,
            image_url=image_url
        )
        try:
            db.add(comment)
            db.commit()
            db.refresh(comment)
        except Exception:
            db.rollback()
            raise
        return comment

    def get_by_post(self, db: Session, *, post_id: int) -> List[Comment]:
        """Top-level comments first, then replies; each group oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .options(selectinload(Comment.author))
            .order_by(
                Comment.parent_comment_id.is_not(None),
                Comment.parent_comment_id.asc(),
                Comment.created_at.asc(),
                Comment.id.asc(),
            )
        )
        return list(db.scalars(stmt).all())


# Singleton instance
crud_comment = CRUDComment(Comment)
