"""Authentication endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_optional_current_user
from app.config import settings
from app.core.exceptions import UnauthorizedException, ValidationException
from app.core.security import create_access_token, create_session_token
from app.crud import crud_user
from app.models.user import User
from app.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterResponse,
    ResetPasswordRequest,
    SessionRefreshResponse,
    UserResponse,
    ValidateResponse,
    normalize_email,
)
from app.services.password_reset import request_reset, reset_password
from app.utils.file_handler import has_upload, save_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


def set_session_cookie(response: Response, user: User) -> None:
    """Attach a fresh signed session token as an HTTP-only cookie."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user.id),
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def normalize_email_field(email: Optional[str]) -> str:
    try:
        return normalize_email(email)
    except ValueError as e:
        raise ValidationException(str(e))


def check_password_length(password: str) -> None:
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters."
        )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="""
    Create an account from a multipart form.

    Fields: `name`, `email`, `password`, optional `country` and `avatar` image.
    """,
)
def register(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
) -> RegisterResponse:
    if not name or not name.strip() or not email or not password:
        raise ValidationException("Name, email, and password are required.")

    email = normalize_email_field(email)
    check_password_length(password)

    if crud_user.get_by_email(db, email):
        raise ValidationException("Email already registered")

    avatar_url = save_upload_file(avatar, "avatar") if has_upload(avatar) else None

    try:
        user = crud_user.create_user(
            db,
            name=name.strip(),
            email=email,
            password=password,
            country=country or None,
            avatar_url=avatar_url,
        )
    except IntegrityError:
        raise ValidationException("Email already registered")

    logger.info(f"[AUTH] Registered user id={user.id}")
    return RegisterResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login",
    description="""
    Authenticate with email and password.

    Sets the HTTP-only session cookie and also returns a bearer token for
    clients that send `Authorization: Bearer <token>`.
    """,
)
def login(
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> LoginResponse:
    user = crud_user.authenticate(db, email=credentials.email, password=credentials.password)
    if not user or not user.is_active:
        logger.info("[AUTH] Failed login attempt")
        raise UnauthorizedException("Invalid email or password")

    set_session_cookie(response, user)
    logger.info(f"[AUTH] User id={user.id} logged in")
    return LoginResponse(
        access_token=create_access_token(user.id),
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
)
def logout(response: Response) -> MessageResponse:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out.")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.get(
    "/validate",
    response_model=ValidateResponse,
    response_model_exclude_none=True,
    summary="Check whether the caller is signed in",
)
def validate_session(
    current_user: Optional[User] = Depends(get_optional_current_user),
) -> ValidateResponse:
    if current_user is None:
        return ValidateResponse(valid=False)
    return ValidateResponse(valid=True, user=UserResponse.model_validate(current_user))


@router.post(
    "/session/refresh",
    response_model=SessionRefreshResponse,
    summary="Re-issue the session cookie",
)
def refresh_session(
    response: Response,
    current_user: User = Depends(get_current_user),
) -> SessionRefreshResponse:
    set_session_cookie(response, current_user)
    return SessionRefreshResponse(user=UserResponse.model_validate(current_user))


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request a password reset link",
    description="""
    Always answers with the same message, whether or not the email belongs
    to an account. When it does, a reset link is mailed in the background.
    """,
)
def forgot_password(
    payload: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> MessageResponse:
    message = request_reset(db, background_tasks, payload.email)
    return MessageResponse(message=message)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Set a new password with a reset token",
)
def reset_password_endpoint(
    payload: ResetPasswordRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    message = reset_password(
        db,
        email=payload.email,
        reset_token=payload.reset_token,
        new_password=payload.new_password,
    )
    return MessageResponse(message=message)
