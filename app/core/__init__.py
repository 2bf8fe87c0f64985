"""Core module exports."""

from .security import (
    create_access_token,
    create_session_token,
    decode_token,
    generate_reset_token,
    get_password_hash,
    tokens_match,
    verify_password,
    ALGORITHM,
)

__all__ = [
    "create_access_token",
    "create_session_token",
    "decode_token",
    "generate_reset_token",
    "get_password_hash",
    "tokens_match",
    "verify_password",
    "ALGORITHM",
]
