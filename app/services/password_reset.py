"""Password reset flow: issue a one-time token and consume it."""

import logging
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import ValidationException
from app.core.security import tokens_match
from app.crud.user import crud_user
from app.services.email import send_email_safely
from app.services.email_templates import build_password_reset_email

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If that email exists, a reset link has been sent."
RESET_SUCCESS_MESSAGE = "Password has been reset."
MISSING_FIELDS_MESSAGE = "Email, token, and new password are required."
INVALID_TOKEN_MESSAGE = "Invalid or expired token."


def _build_reset_link(email: str, token: str) -> str:
    base = settings.FRONTEND_BASE_URL.rstrip("/")
    return f"{base}/reset-password?{urlencode({'token': token, 'email': email})}"


def request_reset(db: Session, background_tasks: BackgroundTasks, email: Optional[str]) -> str:
    """Issue a reset token when the email belongs to an account.

    The returned message is the same whether or not the account exists.
    """
    user = crud_user.get_by_email(db, email)
    if user is None:
        logger.info("[RESET] Reset requested for unknown email")
        return FORGOT_PASSWORD_MESSAGE

    token = crud_user.create_reset_token(
        db, user=user, expires_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
    )
    subject, html_body, text_body = build_password_reset_email(
        user_name=user.name,
        reset_link=_build_reset_link(user.email, token),
        expires_in_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
    )
    background_tasks.add_task(
        send_email_safely,
        to_email=user.email,
        subject=subject,
        html_content=html_body,
        text_content=text_body,
    )
    logger.info(f"[RESET] Reset token issued for user {user.id}")
    return FORGOT_PASSWORD_MESSAGE


def reset_password(
    db: Session,
    *,
    email: Optional[str],
    reset_token: Optional[str],
    new_password: Optional[str],
) -> str:
    """Consume a reset token and set the new password.

    Raises:
        ValidationException: fields missing, password too short, or token
            not valid for this account. Token failures share one message.
    """
    if not email or not reset_token or not new_password:
        raise ValidationException(MISSING_FIELDS_MESSAGE)
    if len(new_password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters."
        )

    user = crud_user.get_by_email(db, email)
    token_ok = user is not None and tokens_match(user.reset_token, reset_token)
    not_expired = (
        user is not None
        and user.reset_token_expires_at is not None
        and user.reset_token_expires_at > datetime.utcnow()
    )
    if not (token_ok and not_expired):
        logger.info("[RESET] Rejected reset attempt")
        raise ValidationException(INVALID_TOKEN_MESSAGE)

    crud_user.update_password(db, user=user, new_password=new_password)
    logger.info(f"[RESET] Password reset for user {user.id}")
    return RESET_SUCCESS_MESSAGE
