# src/chow/schemas/user.py
"""User-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from chow.models.user import Role


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    email: EmailStr
    username: str = Field(..., min_length=5, max_length=64)
    password: str = Field(..., min_length=8, description="Plain-text password, hashed before storage")


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    email: EmailStr
    password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    """Public view of an account; never includes the password hash."""

    id: uuid.UUID
    email: str
    username: str
    role: Role
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    user: UserResponse
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
