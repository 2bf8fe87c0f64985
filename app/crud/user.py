"""CRUD operations for `User` model."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.security import generate_reset_token, get_password_hash, verify_password
from app.crud.base import CRUDBase
from app.models.user import User


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class CRUDUser(CRUDBase[User, dict, dict]):
    def get_by_email(self, db: Session, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        stmt = select(User).where(User.email == _normalize_email(email)).limit(1)
        return db.scalars(stmt).first()

    def create_user(
        self,
        db: Session,
        *,
        name: str,
        email: str,
        password: str,
        country: Optional[str] = None,
        avatar_url: Optional[str] = None,
        role: str = "user",
    ) -> User:
        db_obj = User(
            name=name,
            email=_normalize_email(email),
            password_hash=get_password_hash(password),
            country=country,
            avatar_url=avatar_url,
            role=role,
        )
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """Authenticate user by email and password."""
        user = self.get_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def update_password(self, db: Session, *, user: User, new_password: str) -> User:
        """Write a new password hash and drop any outstanding reset token in the same commit."""
        user.password_hash = get_password_hash(new_password)
        user.reset_token = None
        user.reset_token_expires_at = None
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise
        return user

    def create_reset_token(self, db: Session, *, user: User, expires_minutes: int) -> str:
        """Generate and store a password-reset token with expiration.

        Args:
            db: Database session
            user: User requesting the reset
            expires_minutes: Minutes until the token expires

        Returns:
            The token to be mailed to the user
        """
        token = generate_reset_token()
        user.reset_token = token
        user.reset_token_expires_at = datetime.utcnow() + timedelta(minutes=expires_minutes)
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise
        return token


# Singleton instance
crud_user = CRUDUser(User)
