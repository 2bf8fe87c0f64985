"""Pydantic schemas for `Report` domain objects."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.report import REPORT_STATUSES
from app.schemas.user import UserSummary


class ReportReason(BaseModel):
    """Body of ``POST /posts/{id}/report``."""
    reason: Optional[str] = Field(None, max_length=2000)


class ReportCreate(ReportReason):
    """Body of ``POST /reports``."""
    post_id: int = Field(..., alias="postId", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class ReportStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in REPORT_STATUSES:
            raise ValueError(f"Status must be one of {list(REPORT_STATUSES)}")
        return v


class ReportedPostSummary(BaseModel):
    id: int
    title: str
    author: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ReportResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    reason: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportDetailResponse(ReportResponse):
    """Admin view, with the post and reporter attached."""
    post: Optional[ReportedPostSummary] = None
    user: Optional[UserSummary] = None


class ReportCreatedResponse(BaseModel):
    reported: bool = True
    report: ReportResponse
