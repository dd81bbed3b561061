"""
User models for authentication.

The password hash never appears on any of these models; it stays inside the
credential store.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from taskmanager.models.base import CamelModel

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100


class User(CamelModel):
    """Application-level user response model."""

    id: UUID
    name: str
    email: str
    created_at: datetime

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Identity(BaseModel):
    """Caller identity resolved from a verified bearer token."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str


class RegisterRequest(BaseModel):
    """User registration input."""

    name: str = Field(
        ...,
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH,
        description="Display name",
    )
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="User password",
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    """Login input."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=1,
        max_length=PASSWORD_MAX_LENGTH,
        description="User password",
    )

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AuthResult(CamelModel):
    """User plus a freshly issued bearer token."""

    user: User
    token: str
