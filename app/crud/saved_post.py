"""CRUD operations for SavedPost."""

import logging
from typing import Iterable, List, Set

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.post import Post
from app.models.saved_post import SavedPost

logger = logging.getLogger(__name__)


class CRUDSavedPost(CRUDBase[SavedPost, dict, dict]):
    def save(self, db: Session, *, user_id: int, post_id: int) -> None:
        """Save a post for the user; saving twice is a no-op."""
        try:
            db.add(SavedPost(user_id=user_id, post_id=post_id))
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.debug(f"Post {post_id} already saved by user {user_id}")

    def unsave(self, db: Session, *, user_id: int, post_id: int) -> int:
        """Remove the saved row if any. Returns number of rows removed."""
        try:
            removed = db.execute(
                delete(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
            ).rowcount
            db.commit()
        except Exception:
            db.rollback()
            raise
        return removed

    def saved_post_ids(self, db: Session, *, user_id: int, post_ids: Iterable[int]) -> Set[int]:
        ids = list(post_ids)
        if not ids:
            return set()
        stmt = select(SavedPost.post_id).where(
            SavedPost.user_id == user_id,
            SavedPost.post_id.in_(ids),
        )
        return set(db.scalars(stmt).all())

    def get_posts_for_user(self, db: Session, *, user_id: int) -> List[Post]:
        """Posts saved by the user, most recently saved first."""
        stmt = (
            select(Post)
            .join(SavedPost, SavedPost.post_id == Post.id)
            .where(SavedPost.user_id == user_id)
            .options(selectinload(Post.author))
            .order_by(desc(SavedPost.created_at), desc(SavedPost.id))
        )
        return list(db.scalars(stmt).all())


# Singleton instance
crud_saved_post = CRUDSavedPost(SavedPost)
