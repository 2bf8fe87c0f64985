from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str

    # API
    API_TITLE: str = "DevForum API"
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str
    SESSION_SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_DAYS: int = 30
    SESSION_EXPIRE_DAYS: int = 30
    SESSION_COOKIE_NAME: str = "devforum_session"
    SESSION_COOKIE_SECURE: bool = False
    RESET_TOKEN_EXPIRE_MINUTES: int = 15
    MIN_PASSWORD_LENGTH: int = 8

    # Frontend (used to build reset links)
    FRONTEND_BASE_URL: str = "http://localhost:3000"

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

    # SMTP
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: Optional[int] = None
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM: Optional[str] = None
    SMTP_FROM_NAME: str = "DevForum"
    SMTP_USE_TLS: bool = True

    # Notifications
    NOTIFICATION_MAX_ATTEMPTS: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
