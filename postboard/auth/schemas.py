"""Pydantic schemas for authentication.

Request fields are optional at the schema level: presence and format are
checked by ``AuthService`` so clients get the same messages however the
request is malformed.
"""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from postboard.auth.models import User


# ==============================================================================
# Request Schemas
# ==============================================================================


class SignupRequest(BaseModel):
    """User signup request."""

    email: str | None = Field(None, description="Email address")
    name: str | None = Field(None, description="Unique display name")
    password: str | None = Field(None, description="Password")
    confirm_password: str | None = Field(
        None,
        validation_alias=AliasChoices("confirm_password", "confirmPassword"),
        description="Password confirmation",
    )


class LoginRequest(BaseModel):
    """User login request."""

    email: str | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")


# ==============================================================================
# Response Schemas
# ==============================================================================


class TokenResponse(BaseModel):
    """Issued bearer token."""

    token: str


class UserResponse(BaseModel):
    """Public user projection. Never carries the password hash."""

    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class AuthorResponse(BaseModel):
    """Owner of a post or comment, as embedded in content responses."""

    id: UUID
    name: str

    @classmethod
    def from_user(cls, user: User) -> "AuthorResponse":
        return cls(id=user.id, name=user.name)
