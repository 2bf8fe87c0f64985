"""Pydantic schemas for `User` domain objects and authentication payloads."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(v: Optional[str]) -> Optional[str]:
	if v is None:
		return v
	v = v.strip().lower()
	if not EMAIL_PATTERN.match(v):
		raise ValueError("Email is not valid")
	return v


class UserSummary(BaseModel):
	"""Public author info embedded in posts, comments and notifications."""
	id: int
	name: str
	country: Optional[str] = None
	avatar_url: Optional[str] = None

	model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
	email: str
	role: str
	created_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True, json_schema_extra={
		"example": {
			"id": 1,
			"name": "Ada Lovelace",
			"email": "ada@example.com",
			"country": "UK",
			"avatar_url": "/uploads/avatars/3f1c.png",
			"role": "user",
			"created_at": "2025-01-01T10:00:00Z",
		}
	})


class RegisterResponse(BaseModel):
	id: int
	name: str
	email: str
	avatar_url: Optional[str] = None

	model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
	email: str
	password: str

	@field_validator("email")
	@classmethod
	def validate_email(cls, v: str) -> str:
		return normalize_email(v)

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"email": "ada@example.com",
			"password": "StrongPass!234",
		}
	})


class LoginResponse(BaseModel):
	access_token: str
	token_type: str = "bearer"
	user: UserResponse


class ValidateResponse(BaseModel):
	valid: bool
	user: Optional[UserResponse] = None


class SessionRefreshResponse(BaseModel):
	user: UserResponse


class ForgotPasswordRequest(BaseModel):
	email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
	"""Accepts both the camelCase keys used by the web client and snake_case."""
	email: Optional[str] = None
	reset_token: Optional[str] = Field(None, alias="resetToken")
	new_password: Optional[str] = Field(None, alias="newPassword")

	model_config = ConfigDict(populate_by_name=True, json_schema_extra={
		"example": {
			"email": "ada@example.com",
			"resetToken": "9f86d081884c7d659a2feaa0c55ad015...",
			"newPassword": "AnotherStrongPass!1",
		}
	})


class MessageResponse(BaseModel):
	message: str
