"""Identity resolution: who is making this request?

Two strategies are tried in order. The first one that yields a user id wins;
when every strategy declines, the request is anonymous. Strategies never
raise for bad credentials, they log and decline.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from fastapi import Request
from jose import JWTError

from app.config import settings
from app.core.security import (
    ACCESS_TOKEN_TYPE,
    SESSION_TOKEN_TYPE,
    decode_token,
)

logger = logging.getLogger(__name__)


def _user_id_from_token(token: str, *, secret: str, token_type: str) -> Optional[int]:
    try:
        payload = decode_token(token, secret=secret, token_type=token_type)
        return int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError) as e:
        logger.info(f"[AUTH] Rejected {token_type} token: {type(e).__name__}")
        return None


class IdentityStrategy(ABC):
    """One way of extracting a user id from a request."""

    name: str = "base"

    @abstractmethod
    def resolve(self, request: Request) -> Optional[int]:
        """Return the user id carried by the request, or None."""


class SessionCookieStrategy(IdentityStrategy):
    """Signed session token in the HTTP-only cookie set at login."""

    name = "session_cookie"

    def __init__(self, cookie_name: Optional[str] = None, secret: Optional[str] = None):
        self.cookie_name = cookie_name or settings.SESSION_COOKIE_NAME
        self.secret = secret or settings.SESSION_SECRET_KEY

    def resolve(self, request: Request) -> Optional[int]:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        return _user_id_from_token(token, secret=self.secret, token_type=SESSION_TOKEN_TYPE)


class BearerTokenStrategy(IdentityStrategy):
    """Legacy ``Authorization: Bearer <jwt>`` header."""

    name = "bearer_token"

    def __init__(self, secret: Optional[str] = None):
        self.secret = secret or settings.SECRET_KEY

    def resolve(self, request: Request) -> Optional[int]:
        header = request.headers.get("Authorization")
        if not header:
            return None

        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return _user_id_from_token(token.strip(), secret=self.secret, token_type=ACCESS_TOKEN_TYPE)


class IdentityResolver:
    """Runs strategies in order and returns the first identity found."""

    def __init__(self, strategies: Sequence[IdentityStrategy]):
        self.strategies = list(strategies)

    def resolve(self, request: Request) -> Optional[int]:
        for strategy in self.strategies:
            user_id = strategy.resolve(request)
            if user_id is not None:
                logger.debug(f"[AUTH] Identity {user_id} resolved via {strategy.name}")
                return user_id
        return None


def build_default_resolver() -> IdentityResolver:
    return IdentityResolver([SessionCookieStrategy(), BearerTokenStrategy()])


identity_resolver = build_default_resolver()


__all__ = [
    "IdentityStrategy",
    "SessionCookieStrategy",
    "BearerTokenStrategy",
    "IdentityResolver",
    "build_default_resolver",
    "identity_resolver",
]
