"""API router aggregator."""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, comments, notifications, posts, reports, uploads, users
from app.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(posts.router)
api_router.include_router(comments.router)
api_router.include_router(reports.router)
api_router.include_router(notifications.router)
api_router.include_router(uploads.router)

__all__ = ["api_router"]
