"""Pydantic schemas for Post."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserSummary


class PostResponse(BaseModel):
    """Schema for Post response."""
    id: int
    author_user_id: int
    author: Optional[UserSummary] = None
    title: str
    description: str
    content: str
    code_snippet: str
    tags: List[str] = []
    image_url: Optional[str] = None
    comment_count: int = 0
    likes: int = 0
    helpful_count: int = Field(0, alias="helpfulCount")
    liked: bool = False  # Will be populated based on current user
    helpful: bool = False
    saved: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PostStats(BaseModel):
    """Counts and viewer flags for one post."""
    comment_count: int = 0
    likes: int = 0
    helpful_count: int = 0
    liked: bool = False
    helpful: bool = False
    saved: bool = False


class PostLikeResponse(BaseModel):
    """Response for like toggle."""
    liked: bool
    likes: int


class PostHelpfulResponse(BaseModel):
    """Response for helpful toggle."""
    helpful: bool
    helpful_count: int = Field(..., alias="helpfulCount")

    model_config = ConfigDict(populate_by_name=True)


class SaveResponse(BaseModel):
    saved: bool


class DeleteResponse(BaseModel):
    success: bool = True
