"""CRUD operations for user/target toggle join tables (likes, helpful marks)."""

import logging
from typing import Dict, Iterable, Set, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.comment_helpful import CommentHelpful
from app.models.comment_like import CommentLike
from app.models.post_helpful import PostHelpful
from app.models.post_like import PostLike

logger = logging.getLogger(__name__)


class CRUDToggle(CRUDBase):
    """Toggle a (user, target) join row.

    The join table carries a UNIQUE constraint on (user_id, target column);
    correctness under concurrent requests comes from that constraint, not
    from a read-before-write check.
    """

    def __init__(self, model, target_field: str):
        super().__init__(model)
        self.target_field = target_field
        self.target_column = getattr(model, target_field)

    def toggle(self, db: Session, *, user_id: int, target_id: int) -> Tuple[bool, int]:
        """
        Flip the association between user and target.

        Returns:
            (is_active: bool, new_count: int)
        """
        stmt = delete(self.model).where(
            self.model.user_id == user_id,
            self.target_column == target_id,
        )
        try:
            removed = db.execute(stmt).rowcount
            if removed:
                db.commit()
                is_active = False
            else:
                db.add(self.model(user_id=user_id, **{self.target_field: target_id}))
                db.commit()
                is_active = True
        except IntegrityError:
            # A concurrent request inserted the same row first.
            db.rollback()
            logger.info(
                f"[TOGGLE] Duplicate {self.model.__tablename__} row for user={user_id} "
                f"target={target_id}; keeping existing row"
            )
            is_active = True
        except Exception:
            db.rollback()
            raise

        return is_active, self.count_for_target(db, target_id=target_id)

    def count_for_target(self, db: Session, *, target_id: int) -> int:
        stmt = select(func.count()).select_from(self.model).where(self.target_column == target_id)
        return db.scalar(stmt) or 0

    def counts_for_targets(self, db: Session, *, target_ids: Iterable[int]) -> Dict[int, int]:
        """Counts for many targets with a single grouped query."""
        ids = list(target_ids)
        if not ids:
            return {}
        stmt = (
            select(self.target_column, func.count())
            .where(self.target_column.in_(ids))
            .group_by(self.target_column)
        )
        return {target_id: count for target_id, count in db.execute(stmt).all()}

    def active_targets(self, db: Session, *, user_id: int, target_ids: Iterable[int]) -> Set[int]:
        """Subset of ``target_ids`` the user currently has a row for."""
        ids = list(target_ids)
        if not ids:
            return set()
        stmt = select(self.target_column).where(
            self.model.user_id == user_id,
            self.target_column.in_(ids),
        )
        return set(db.scalars(stmt).all())


# Singleton instances
crud_post_like = CRUDToggle(PostLike, "post_id")
crud_post_helpful = CRUDToggle(PostHelpful, "post_id")
crud_comment_like = CRUDToggle(CommentLike, "comment_id")
crud_comment_helpful = CRUDToggle(CommentHelpful, "comment_id")
