"""Auth API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from bookshelf.shared.enums import UserRole


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    email: EmailStr = Field(...)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Authenticated user (no credential material)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
