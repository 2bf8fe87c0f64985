"""Comment endpoints: threaded comments on posts."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_user,
    get_current_user_id,
    get_db,
    get_notification_outbox,
)
from app.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from app.crud import crud_comment, crud_comment_helpful, crud_comment_like, crud_post
from app.models.comment import Comment
from app.models.user import User
from app.schemas.comment import (
    CommentHelpfulResponse,
    CommentLikeResponse,
    CommentResponse,
    CommentUpdate,
)
from app.services.notification_service import NotificationOutbox, describe_interaction
from app.utils.file_handler import delete_file, has_upload, save_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/comments",
    tags=["Comments"],
)


def build_comment_responses(
    db: Session,
    comments: List[Comment],
    viewer_id: Optional[int] = None
) -> List[CommentResponse]:
    ids = [comment.id for comment in comments]
    like_counts = crud_comment_like.counts_for_targets(db, target_ids=ids)
    helpful_counts = crud_comment_helpful.counts_for_targets(db, target_ids=ids)
    liked, helpful = set(), set()
    if viewer_id is not None:
        liked = crud_comment_like.active_targets(db, user_id=viewer_id, target_ids=ids)
        helpful = crud_comment_helpful.active_targets(db, user_id=viewer_id, target_ids=ids)

    return [
        CommentResponse.model_validate(comment).model_copy(update={
            "like_count": like_counts.get(comment.id, 0),
            "helpful_count": helpful_counts.get(comment.id, 0),
            "liked": comment.id in liked,
            "helpful": comment.id in helpful,
        })
        for comment in comments
    ]


def get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = crud_comment.get(db, comment_id)
    if not comment:
        raise NotFoundException("Comment not found")
    return comment


@router.get(
    "/post/{post_id}",
    response_model=List[CommentResponse],
    status_code=status.HTTP_200_OK,
    summary="List comments on a post",
    description="Top-level comments first, then replies, each oldest first.",
)
def list_comments(
    post_id: int,
    viewer_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[CommentResponse]:
    if not crud_post.get_by_id(db, post_id=post_id):
        raise NotFoundException("Post not found")
    comments = crud_comment.get_by_post(db, post_id=post_id)
    return build_comment_responses(db, comments, viewer_id)


@router.post(
    "/post/{post_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
    description="""
    Multipart form: `content`, optional `parentId` to reply to a comment on
    the same post, optional `image` file or `imageUrl`.
    """,
)
def create_comment(
    post_id: int,
    content: Optional[str] = Form(None),
    parentId: Optional[int] = Form(None),
    imageUrl: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    db: Session = Depends(get_db),
) -> CommentResponse:
    if not content or not content.strip():
        raise ValidationException("Content is required.")

    post = crud_post.get_by_id(db, post_id=post_id)
    if not post:
        raise NotFoundException("Post not found")

    if parentId is not None:
        parent = crud_comment.get(db, parentId)
        if not parent or parent.post_id != post.id:
            raise NotFoundException("Parent comment not found")

    if has_upload(image):
        image_url = save_upload_file(image, "comment_image")
    else:
        image_url = imageUrl or None

    comment = crud_comment.create_comment(
        db,
        post_id=post.id,
        author_user_id=current_user.id,
        content=content.strip(),
        parent_comment_id=parentId,
        image_url=image_url,
    )

    outbox.enqueue(
        recipient_user_id=post.author_user_id,
        actor_user_id=current_user.id,
        notification_type="comment",
        message=describe_interaction(current_user.name, "comment"),
        post_id=post.id,
        comment_id=comment.id,
    )
    return build_comment_responses(db, [comment], current_user.id)[0]


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit a comment",
)
def update_comment(
    comment_id: int,
    comment_in: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CommentResponse:
    comment = get_comment_or_404(db, comment_id)
    if comment.author_user_id != current_user.id:
        raise ForbiddenException("Not authorized to edit this comment")

    if not comment_in.content.strip():
        raise ValidationException("Content is required.")

    update_data = {"content": comment_in.content.strip()}
    old_image = comment.image_url
    if "image_url" in comment_in.model_fields_set:
        update_data["image_url"] = comment_in.image_url or None

    comment = crud_comment.update(db, db_obj=comment, obj_in=update_data)
    if "image_url" in update_data and old_image != comment.image_url:
        delete_file(old_image)

    return build_comment_responses(db, [comment], current_user.id)[0]


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment and its replies",
)
def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    comment = get_comment_or_404(db, comment_id)
    if comment.author_user_id != current_user.id:
        raise ForbiddenException("Not authorized to delete this comment")

    image_url = comment.image_url
    crud_comment.remove(db, db_obj=comment)
    delete_file(image_url)
    logger.info(f"Comment {comment_id} deleted by user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{comment_id}/like",
    response_model=CommentLikeResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle like on comment",
)
def toggle_comment_like(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    db: Session = Depends(get_db),
) -> CommentLikeResponse:
    comment = get_comment_or_404(db, comment_id)
    liked, like_count = crud_comment_like.toggle(db, user_id=current_user.id, target_id=comment.id)

    outbox.enqueue(
        recipient_user_id=comment.author_user_id,
        actor_user_id=current_user.id,
        notification_type="comment_like",
        message=describe_interaction(current_user.name, "comment_like"),
        post_id=comment.post_id,
        comment_id=comment.id,
    )
    return CommentLikeResponse(liked=liked, like_count=like_count)


@router.post(
    "/{comment_id}/helpful",
    response_model=CommentHelpfulResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle helpful mark on comment",
)
def toggle_comment_helpful(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    db: Session = Depends(get_db),
) -> CommentHelpfulResponse:
    comment = get_comment_or_404(db, comment_id)
    helpful, helpful_count = crud_comment_helpful.toggle(
        db, user_id=current_user.id, target_id=comment.id
    )

    outbox.enqueue(
        recipient_user_id=comment.author_user_id,
        actor_user_id=current_user.id,
        notification_type="comment_helpful",
        message=describe_interaction(current_user.name, "comment_helpful"),
        post_id=comment.post_id,
        comment_id=comment.id,
    )
    return CommentHelpfulResponse(helpful=helpful, helpful_count=helpful_count)
