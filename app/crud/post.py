"""CRUD operations for Post."""

from typing import Dict, Iterable, List, Optional
from sqlalchemy import select, func, desc
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.crud.interaction import crud_post_helpful, crud_post_like
from app.crud.saved_post import crud_saved_post
from app.models.comment import Comment
from app.models.post import Post
from app.schemas.post import PostStats


class CRUDPost(CRUDBase[Post, dict, dict]):
    """CRUD operations for Post."""

    def create_post(
        self,
        db: Session,
        *,
        author_user_id: int,
        title: str,
        description: str,
        content: str,
        code_snippet: str,
        tags: List[str],
        image_url: Optional[str] = None
    ) -> Post:
        """Create a new post."""
        post = Post(
            author_user_id=author_user_id,
            title=title,
            description=description,
            content=content,
            code_snippet=code_snippet,
            tags=tags,
            image_url=image_url,
        )
        try:
            db.add(post)
            db.commit()
            db.refresh(post)
        except Exception:
            db.rollback()
            raise
        return post

    def get_all(self, db: Session, *, skip: int = 0, limit: Optional[int] = None) -> List[Post]:
        """Get all posts, newest first."""
        stmt = (
            select(Post)
            .options(selectinload(Post.author))
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(skip)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.scalars(stmt).all())

    def get_by_id(self, db: Session, *, post_id: int) -> Optional[Post]:
        """Get post by ID."""
        return db.get(Post, post_id)

    def get_stats(
        self,
        db: Session,
        *,
        post_ids: Iterable[int],
        viewer_id: Optional[int] = None
    ) -> Dict[int, PostStats]:
        """
        Counts and viewer flags for a page of posts.

        One grouped query per aggregate, whatever the page size.
        """
        ids = list(post_ids)
        if not ids:
            return {}

        comment_counts = dict(
            db.execute(
                select(Comment.post_id, func.count())
                .where(Comment.post_id.in_(ids))
                .group_by(Comment.post_id)
            ).all()
        )
        like_counts = crud_post_like.counts_for_targets(db, target_ids=ids)
        helpful_counts = crud_post_helpful.counts_for_targets(db, target_ids=ids)

        liked, helpful, saved = set(), set(), set()
        if viewer_id is not None:
            liked = crud_post_like.active_targets(db, user_id=viewer_id, target_ids=ids)
            helpful = crud_post_helpful.active_targets(db, user_id=viewer_id, target_ids=ids)
            saved = crud_saved_post.saved_post_ids(db, user_id=viewer_id, post_ids=ids)

        return {
            post_id: PostStats(
                comment_count=comment_counts.get(post_id, 0),
                likes=like_counts.get(post_id, 0),
                helpful_count=helpful_counts.get(post_id, 0),
                liked=post_id in liked,
                helpful=post_id in helpful,
                saved=post_id in saved,
            )
            for post_id in ids
        }


# Singleton instance
crud_post = CRUDPost(Post)
