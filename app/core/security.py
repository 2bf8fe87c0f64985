"""Security utilities for JWT session/bearer tokens and password hashing."""

import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings


# Password hashing context - supports PBKDF2 (primary) and bcrypt (legacy)
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

# JWT settings
ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
SESSION_TOKEN_TYPE = "session"


def get_password_hash(password: str) -> str:
    """Hash a password using PBKDF2 (primary) or bcrypt (fallback)."""
    # Truncate to 72 bytes (bcrypt limit, kept for compatibility)
    password = password[:72]
    try:
        return pwd_context.hash(password)
    except ValueError:
        # Fallback to PBKDF2 if there's an issue
        fallback_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
        return fallback_ctx.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    plain_password = plain_password[:72]
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Return False if the hash scheme is unsupported
        return False


def _encode(
    user_id: int, *, token_type: str, secret: str, expires_delta: timedelta
) -> str:
    if not secret:
        raise ValueError(f"Signing secret for {token_type} tokens is not set")

    to_encode = {
        "sub": str(user_id),
        "type": token_type,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create a legacy bearer JWT signed with SECRET_KEY.

    Args:
        user_id: Subject of the token
        expires_delta: Custom expiration time. If None, uses ACCESS_TOKEN_EXPIRE_DAYS

    Returns:
        Encoded JWT token
    """
    return _encode(
        user_id,
        token_type=ACCESS_TOKEN_TYPE,
        secret=settings.SECRET_KEY,
        expires_delta=expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    )


def create_session_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create the signed value stored in the HTTP-only session cookie."""
    return _encode(
        user_id,
        token_type=SESSION_TOKEN_TYPE,
        secret=settings.SESSION_SECRET_KEY,
        expires_delta=expires_delta or timedelta(days=settings.SESSION_EXPIRE_DAYS),
    )


def decode_token(token: str, *, secret: str, token_type: str) -> Dict[str, Any]:
    """Decode and verify a JWT token.

    Args:
        token: JWT token string
        secret: Key the token must be signed with
        token_type: Expected value of the ``type`` claim

    Returns:
        Token payload dictionary

    Raises:
        JWTError: If the token is malformed, expired, badly signed or of another type
    """
    payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    if payload.get("type") != token_type:
        raise JWTError(f"Expected a {token_type} token")
    return payload


def generate_reset_token() -> str:
    """Cryptographically random password-reset token."""
    return secrets.token_hex(32)


def tokens_match(expected: Optional[str], provided: Optional[str]) -> bool:
    """Constant-time comparison that treats missing values as a mismatch."""
    if not expected or not provided:
        return False
    return secrets.compare_digest(expected, provided)
