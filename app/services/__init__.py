"""Services package for DevForum."""

from .notification_service import NotificationOutbox, describe_interaction
from .password_reset import request_reset, reset_password

__all__ = [
    "NotificationOutbox",
    "describe_interaction",
    "request_reset",
    "reset_password",
]
