from .user import (
	UserSummary,
	UserResponse,
	RegisterResponse,
	LoginRequest,
	LoginResponse,
	ValidateResponse,
	SessionRefreshResponse,
	ForgotPasswordRequest,
	ResetPasswordRequest,
	MessageResponse,
)
from .post import (
	PostResponse,
	PostStats,
	PostLikeResponse,
	PostHelpfulResponse,
	SaveResponse,
	DeleteResponse,
)
from .comment import (
	CommentUpdate,
	CommentResponse,
	CommentLikeResponse,
	CommentHelpfulResponse,
)
from .notification import (
	NotificationCreate,
	NotificationUpdate,
	NotificationResponse,
	UnreadCountResponse,
	MarkAllReadResponse,
)
from .report import (
	ReportReason,
	ReportCreate,
	ReportStatusUpdate,
	ReportResponse,
	ReportDetailResponse,
	ReportCreatedResponse,
)

__all__ = [
	# User / auth
	"UserSummary",
	"UserResponse",
	"RegisterResponse",
	"LoginRequest",
	"LoginResponse",
	"ValidateResponse",
	"SessionRefreshResponse",
	"ForgotPasswordRequest",
	"ResetPasswordRequest",
	"MessageResponse",
	# Post
	"PostResponse",
	"PostStats",
	"PostLikeResponse",
	"PostHelpfulResponse",
	"SaveResponse",
	"DeleteResponse",
	# Comment
	"CommentUpdate",
	"CommentResponse",
	"CommentLikeResponse",
	"CommentHelpfulResponse",
	# Notification
	"NotificationCreate",
	"NotificationUpdate",
	"NotificationResponse",
	"UnreadCountResponse",
	"MarkAllReadResponse",
	# Report
	"ReportReason",
	"ReportCreate",
	"ReportStatusUpdate",
	"ReportResponse",
	"ReportDetailResponse",
	"ReportCreatedResponse",
]
