"""
Auth Schemas.

Pydantic schemas for login, session and account management.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    username: str = Field(..., min_length=1, max_length=64, examples=["admin"])
    password: str = Field(..., min_length=1, max_length=256)


class UserResponse(BaseModel):
    """Public view of an account. Never includes the password hash."""

    id: str
    username: str
    email: str | None = None
    avatar_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Issued session token."""

    token: str
    token_type: str = "bearer"
    user: UserResponse


class ChangePasswordRequest(BaseModel):
    """Change the password and/or the username of the current account."""

    current_password: str = Field(..., min_length=1)
    new_username: str | None = Field(default=None, max_length=64)
    new_password: str | None = Field(default=None, max_length=256)


class FactoryResetRequest(BaseModel):
    """Confirmation payload for the factory reset."""

    confirm_text: str = Field(default="", description='Must be exactly "RESET"')
