from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    name = Column(String(255), nullable=False)
    country = Column(String(100))
    avatar_url = Column(String(500))

    # Role & Authorization
    role = Column(String(20), nullable=False, default="user", index=True)

    # Account Status
    is_active = Column(Boolean, default=True, index=True)

    # Password reset
    reset_token = Column(String(255), index=True)
    reset_token_expires_at = Column(TIMESTAMP)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Constraints
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="check_user_role"),
    )

    # Relationships
    posts = relationship("Post", back_populates="author", cascade="all, delete")
