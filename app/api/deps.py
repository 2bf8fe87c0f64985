"""FastAPI dependency injection functions for authentication and database access."""

import logging
from typing import Callable, Optional, Set

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.identity import identity_resolver
from app.crud import crud_user
from app.database import get_db
from app.models.user import User
from app.services.notification_service import NotificationOutbox

logger = logging.getLogger(__name__)


def get_current_user_id(request: Request) -> Optional[int]:
    """
    Identity carried by the request, or None when anonymous.

    Session cookie wins over the legacy bearer header.
    """
    return identity_resolver.resolve(request)


def get_optional_current_user(
    user_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Dependency to optionally get current authenticated user.
    Returns None if no valid identity is provided or the account is gone.

    Useful for endpoints that allow both authenticated and unauthenticated access.
    """
    if user_id is None:
        return None

    user = crud_user.get(db, user_id)
    if user is None or not user.is_active:
        return None
    return user


def get_current_user(
    user_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get current authenticated user.

    Raises:
        UnauthorizedException: 401 if no identity, user not found or inactive
    """
    if user_id is None:
        raise UnauthorizedException()

    user = crud_user.get(db, user_id)
    if user is None:
        logger.warning(f"[AUTH] Token references missing user id={user_id}")
        raise UnauthorizedException()
    if not user.is_active:
        logger.warning(f"[AUTH] Inactive user id={user_id} rejected")
        raise UnauthorizedException()

    return user


def require_role(*allowed_roles: str) -> Callable:
    """
    Factory function to create role-based access control dependency.

    Example:
        @router.get("/reports")
        def list_reports(current_user: User = Depends(require_role("admin"))):
            ...
    """
    def role_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if current_user.role not in allowed_roles:
            raise ForbiddenException(
                f"Not enough permissions. Required role(s): {', '.join(allowed_roles)}"
            )
        return current_user

    return role_checker


def get_notification_outbox(background_tasks: BackgroundTasks) -> NotificationOutbox:
    """
    Per-request notification outbox, flushed after the response is sent.

    Background tasks only run when the handler returned normally, so a failed
    request delivers nothing.
    """
    outbox = NotificationOutbox()
    background_tasks.add_task(outbox.flush)
    return outbox


async def get_form_keys(request: Request) -> Set[str]:
    """
    Names of the fields present in the submitted form.

    FastAPI turns an empty form value into the parameter default, so this is
    the only way to tell a blank field apart from a missing one.
    """
    form = await request.form()
    return set(form.keys())


__all__ = [
    "get_db",
    "get_current_user_id",
    "get_current_user",
    "get_optional_current_user",
    "require_role",
    "get_notification_outbox",
    "get_form_keys",
]
