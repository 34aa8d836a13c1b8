"""Account-related Pydantic schemas."""

import re

from pydantic import Field, field_validator

from .common import ApiResponse, CamelModel

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{2,20}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_username(value: str) -> str:
    """Return ``value`` stripped, or raise ValueError naming the broken rule."""
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Username must be at least 2 characters")
    if len(value) > 20:
        raise ValueError("Username must be no more than 20 characters")
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username must not contain special characters")
    return value


class SignUpRequest(CamelModel):
    """Schema for account registration."""

    username: str
    email: str
    password: str = Field(..., min_length=6, description="At least 6 characters")

    @field_validator("username")
    @classmethod
    def _check_username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v


class VerifyCodeRequest(CamelModel):
    """Schema for submitting the emailed verification code."""

    username: str
    code: str = Field(..., min_length=6, max_length=6)


class SignInRequest(CamelModel):
    """Credentials; ``identifier`` is either the email or the username."""

    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenEnvelope(ApiResponse):
    """Response returned after successful sign-in."""

    access_token: str
    token_type: str = "bearer"


class UserProfile(CamelModel):
    """The caller's own account details."""

    id: int
    username: str
    email: str
    is_verified: bool
    is_accepting_messages: bool


class ProfileEnvelope(ApiResponse):
    """Response carrying the caller's profile."""

    user: UserProfile


class AcceptMessagesRequest(CamelModel):
    """Schema for the user-level direct message toggle."""

    accept_messages: bool


class AcceptMessagesEnvelope(ApiResponse):
    """Response carrying the user-level accepting flag."""

    is_accepting_messages: bool
