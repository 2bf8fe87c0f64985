"""Post endpoints: problem/solution write-ups and the interactions on them."""

import json
import logging
from typing import List, Optional, Set

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_user,
    get_current_user_id,
    get_db,
    get_form_keys,
    get_notification_outbox,
)
from app.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from app.crud import crud_post, crud_post_helpful, crud_post_like, crud_saved_post
from app.models.post import Post
from app.models.user import User
from app.schemas.post import (
    DeleteResponse,
    PostHelpfulResponse,
    PostLikeResponse,
    PostResponse,
    SaveResponse,
)
from app.services.notification_service import NotificationOutbox, describe_interaction
from app.utils.file_handler import delete_file, has_upload, save_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
)


def build_post_responses(
    db: Session,
    posts: List[Post],
    viewer_id: Optional[int] = None
) -> List[PostResponse]:
    """Attach counts and the viewer's flags to a page of posts."""
    stats = crud_post.get_stats(db, post_ids=[post.id for post in posts], viewer_id=viewer_id)
    return [
        PostResponse.model_validate(post).model_copy(update=stats[post.id].model_dump())
        for post in posts
    ]


def get_post_or_404(db: Session, post_id: int) -> Post:
    post = crud_post.get_by_id(db, post_id=post_id)
    if not post:
        raise NotFoundException("Post not found")
    return post


def parse_tags(raw: Optional[str]) -> List[str]:
    """Tags arrive as a JSON array string inside the multipart form."""
    if raw is None or not raw.strip():
        return []
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationException("Tags must be a JSON array of strings.")
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise ValidationException("Tags must be a JSON array of strings.")
    return [tag.strip() for tag in tags if tag.strip()]


@router.get(
    "",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List all posts",
    description="""
    All posts, newest first, with author, counts and the caller's
    liked/helpful/saved flags (all false for anonymous callers).
    """,
)
def list_posts(
    viewer_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[PostResponse]:
    posts = crud_post.get_all(db)
    return build_post_responses(db, posts, viewer_id)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new post",
    description="""
    Multipart form: `headline`, `errorDescription`, `solution`, `codeSnippet`,
    `tags` (JSON array string) and either a `screenshot` file or an `imageUrl`.
    """,
)
def create_post(
    headline: Optional[str] = Form(None),
    errorDescription: Optional[str] = Form(None),
    solution: Optional[str] = Form(None),
    codeSnippet: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    imageUrl: Optional[str] = Form(None),
    screenshot: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PostResponse:
    if not headline or not headline.strip() or not solution or not solution.strip():
        raise ValidationException("Headline and solution are required.")

    parsed_tags = parse_tags(tags)

    if has_upload(screenshot):
        image_url = save_upload_file(screenshot, "post_screenshot")
    else:
        image_url = imageUrl or None

    post = crud_post.create_post(
        db,
        author_user_id=current_user.id,
        title=headline.strip(),
        description=errorDescription or "",
        content=solution,
        code_snippet=codeSnippet or "",
        tags=parsed_tags,
        image_url=image_url,
    )
    logger.info(f"Post {post.id} created by user {current_user.id}")
    return build_post_responses(db, [post], current_user.id)[0]


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post detail",
)
def get_post(
    post_id: int,
    viewer_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> PostResponse:
    post = get_post_or_404(db, post_id)
    return build_post_responses(db, [post], viewer_id)[0]


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Update post",
    description="""
    Same fields as creation, all optional. An empty `imageUrl` removes the
    image. Only the author may edit.
    """,
)
def update_post(
    post_id: int,
    headline: Optional[str] = Form(None),
    errorDescription: Optional[str] = Form(None),
    solution: Optional[str] = Form(None),
    codeSnippet: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    imageUrl: Optional[str] = Form(None),
    screenshot: Optional[UploadFile] = File(None),
    form_keys: Set[str] = Depends(get_form_keys),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PostResponse:
    post = get_post_or_404(db, post_id)
    if post.author_user_id != current_user.id:
        raise ForbiddenException("Not authorized to update this post")

    update_data = {}
    if headline is not None:
        if not headline.strip():
            raise ValidationException("Headline cannot be empty.")
        update_data["title"] = headline.strip()
    if solution is not None:
        if not solution.strip():
            raise ValidationException("Solution cannot be empty.")
        update_data["content"] = solution
    if errorDescription is not None:
        update_data["description"] = errorDescription
    if codeSnippet is not None:
        update_data["code_snippet"] = codeSnippet
    if tags is not None:
        update_data["tags"] = parse_tags(tags)

    old_image = post.image_url
    if has_upload(screenshot):
        update_data["image_url"] = save_upload_file(screenshot, "post_screenshot")
    elif "imageUrl" in form_keys:
        update_data["image_url"] = imageUrl or None

    post = crud_post.update(db, db_obj=post, obj_in=update_data)
    if "image_url" in update_data and old_image != post.image_url:
        delete_file(old_image)

    return build_post_responses(db, [post], current_user.id)[0]


@router.delete(
    "/{post_id}",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete post",
    description="Deletes the post with its comments, interactions, reports and notifications.",
)
def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    post = get_post_or_404(db, post_id)
    if post.author_user_id != current_user.id:
        raise ForbiddenException("Not authorized to delete this post")

    image_url = post.image_url
    crud_post.remove(db, db_obj=post)
    delete_file(image_url)
    logger.info(f"Post {post_id} deleted by user {current_user.id}")
    return DeleteResponse(success=True)


@router.post(
    "/{post_id}/like",
    response_model=PostLikeResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle like on post",
)
def toggle_like(
    post_id: int,
    current_user: User = Depends(get_current_user),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    db: Session = Depends(get_db),
) -> PostLikeResponse:
    post = get_post_or_404(db, post_id)
    liked, likes = crud_post_like.toggle(db, user_id=current_user.id, target_id=post.id)

    outbox.enqueue(
        recipient_user_id=post.author_user_id,
        actor_user_id=current_user.id,
        notification_type="like",
        message=describe_interaction(current_user.name, "like"),
        post_id=post.id,
    )
    return PostLikeResponse(liked=liked, likes=likes)


@router.post(
    "/{post_id}/helpful",
    response_model=PostHelpfulResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle helpful mark on post",
)
def toggle_helpful(
    post_id: int,
    current_user: User = Depends(get_current_user),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    db: Session = Depends(get_db),
) -> PostHelpfulResponse:
    post = get_post_or_404(db, post_id)
    helpful, helpful_count = crud_post_helpful.toggle(db, user_id=current_user.id, target_id=post.id)

    outbox.enqueue(
        recipient_user_id=post.author_user_id,
        actor_user_id=current_user.id,
        notification_type="helpful",
        message=describe_interaction(current_user.name, "helpful"),
        post_id=post.id,
    )
    return PostHelpfulResponse(helpful=helpful, helpful_count=helpful_count)


@router.post(
    "/{post_id}/save",
    response_model=SaveResponse,
    status_code=status.HTTP_200_OK,
    summary="Save post",
)
def save_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SaveResponse:
    post = get_post_or_404(db, post_id)
    crud_saved_post.save(db, user_id=current_user.id, post_id=post.id)
    return SaveResponse(saved=True)


@router.post(
    "/{post_id}/unsave",
    response_model=SaveResponse,
    status_code=status.HTTP_200_OK,
    summary="Unsave post",
)
def unsave_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SaveResponse:
    post = get_post_or_404(db, post_id)
    crud_saved_post.unsave(db, user_id=current_user.id, post_id=post.id)
    return SaveResponse(saved=False)
