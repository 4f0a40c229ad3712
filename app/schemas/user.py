"""User-related Pydantic schemas for request/response validation.

Request fields are optional on purpose: presence and format rules are
enforced by ``UserService`` so clients get the documented 400/401 messages
instead of a generic validation error.
"""

from typing import Optional

from pydantic import Field

from .base import BaseModelSchema, BaseSchema


class UserRegisterRequest(BaseSchema):
    """Schema for user registration request."""

    email: Optional[str] = Field(None, description="User's email address")
    password: Optional[str] = Field(None, description="Plaintext password, at least 6 characters")
    name: Optional[str] = Field(None, description="Display name")


class UserLoginRequest(BaseSchema):
    """Schema for email/password login request."""

    email: Optional[str] = None
    password: Optional[str] = None


class GoogleLoginRequest(BaseSchema):
    """Schema for Google Sign-In request."""

    googleToken: Optional[str] = Field(None, description="Google ID token from the client")


class UserResponse(BaseModelSchema):
    """Schema for user response data."""

    email: str
    name: str
    google_id: Optional[str] = None


class LoginResponse(BaseSchema):
    """Schema for login response."""

    token: str
    userId: str
    username: str


class GoogleLoginResponse(BaseSchema):
    """Schema for Google login response."""

    access_token: str
