import logging

from fastapi import FastAPI, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .api.v1.api import api_router
from .api.v1.endpoints import uploads
from .config import settings
from .core.exceptions import register_exception_handlers
from .database import get_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    debug=settings.DEBUG
)

register_exception_handlers(app)
app.include_router(api_router)
# Stored URLs are "/uploads/...", so serve them at the root as well
app.include_router(uploads.router)


# Root endpoint
@app.get("/")
def read_root():
    return {
        "message": "Welcome to DevForum API",
        "version": settings.API_VERSION,
        "status": "running"
    }


# Health check endpoint
@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """API and database health check"""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        database = "unavailable"
    return {"status": "healthy" if database == "ok" else "degraded", "database": database}
