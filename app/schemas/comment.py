"""Pydantic schemas for Comment."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserSummary


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""
    content: str = Field(..., min_length=1)
    image_url: Optional[str] = Field(None, alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)


class CommentResponse(BaseModel):
    id: int
    post_id: int
    author_user_id: int
    author: Optional[UserSummary] = None
    parent_comment_id: Optional[int] = None
    content: str
    image_url: Optional[str] = None
    like_count: int = Field(0, alias="likeCount")
    helpful_count: int = Field(0, alias="helpfulCount")
    liked: bool = False
    helpful: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CommentLikeResponse(BaseModel):
    liked: bool
    like_count: int = Field(..., alias="likeCount")

    model_config = ConfigDict(populate_by_name=True)


class CommentHelpfulResponse(BaseModel):
    helpful: bool
    helpful_count: int = Field(..., alias="helpfulCount")

    model_config = ConfigDict(populate_by_name=True)
