"""Pydantic schemas for `Notification` domain objects."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.models.notification import NOTIFICATION_TYPES
from app.schemas.user import UserSummary


class NotificationCreate(BaseModel):
    user_id: int
    notification_type: str
    message: str
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    from_user_id: Optional[int] = None

    @field_validator("notification_type")
    @classmethod
    def validate_notification_type(cls, v: str) -> str:
        if v not in NOTIFICATION_TYPES:
            raise ValueError(f"Notification type must be one of {sorted(NOTIFICATION_TYPES)}")
        return v


class NotificationUpdate(BaseModel):
    is_read: Optional[bool] = None
    read_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    notification_type: str
    message: str
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    from_user_id: Optional[int] = None
    from_user: Optional[UserSummary] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, json_schema_extra={
        "example": {
            "id": 1,
            "user_id": 2,
            "notification_type": "like",
            "message": "Your post was liked.",
            "post_id": 10,
            "comment_id": None,
            "from_user_id": 3,
            "from_user": {"id": 3, "name": "Grace", "country": None, "avatar_url": None},
            "is_read": False,
            "read_at": None,
            "created_at": "2025-02-13T10:00:00Z",
        }
    })


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    success: bool = True
    read_count: int = 0
