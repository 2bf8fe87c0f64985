"""User endpoints."""

import logging
from typing import List, Optional, Set

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_form_keys
from app.api.v1.endpoints.auth import check_password_length, normalize_email_field
from app.api.v1.endpoints.posts import build_post_responses
from app.core.exceptions import ValidationException
from app.core.security import get_password_hash
from app.crud import crud_saved_post, crud_user
from app.models.user import User
from app.schemas.post import PostResponse
from app.schemas.user import UserResponse
from app.utils.file_handler import delete_file, has_upload, save_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user profile",
)
def get_my_profile(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update current user profile",
    description="""
    Multipart form: `name`, `email`, `country`, `password`, `avatar` file or
    `imageUrl`. Send an empty `imageUrl` to remove the avatar.
    """,
)
def update_my_profile(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    imageUrl: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    form_keys: Set[str] = Depends(get_form_keys),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    update_data = {}

    if name is not None:
        if not name.strip():
            raise ValidationException("Name cannot be empty.")
        update_data["name"] = name.strip()

    if email is not None:
        new_email = normalize_email_field(email)
        if new_email != current_user.email:
            existing = crud_user.get_by_email(db, new_email)
            if existing and existing.id != current_user.id:
                raise ValidationException("Email already registered")
            update_data["email"] = new_email

    if country is not None:
        update_data["country"] = country or None

    if password:
        check_password_length(password)
        update_data["password_hash"] = get_password_hash(password)

    old_avatar = current_user.avatar_url
    if has_upload(avatar):
        update_data["avatar_url"] = save_upload_file(avatar, "avatar")
    elif "imageUrl" in form_keys:
        update_data["avatar_url"] = imageUrl or None

    try:
        user = crud_user.update(db, db_obj=current_user, obj_in=update_data)
    except IntegrityError:
        raise ValidationException("Email already registered")

    if "avatar_url" in update_data and old_avatar != user.avatar_url:
        delete_file(old_avatar)

    logger.info(f"User {user.id} updated profile fields: {sorted(update_data)}")
    return UserResponse.model_validate(user)


@router.get(
    "/me/saved-posts",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List posts saved by the current user",
)
def list_saved_posts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[PostResponse]:
    posts = crud_saved_post.get_posts_for_user(db, user_id=current_user.id)
    return build_post_responses(db, posts, current_user.id)
