"""Pydantic schemas for auth: register, login, user response, token."""
from pydantic import BaseModel, EmailStr, Field

from chefbook.models.user import UserRole


class UserCreate(BaseModel):
    """Request body for POST /auth/register."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.CUSTOMER


class UserResponse(BaseModel):
    """User in API responses (no password)."""
    id: int
    email: str
    name: str
    role: UserRole
    avatar_url: str | None = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    """Response for login/register: access_token and type."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    """Request body for PATCH /auth/me. Omitted fields are left unchanged; an empty avatar_url clears it."""
    name: str | None = Field(None, min_length=1, max_length=255)
    avatar_url: str | None = Field(None, max_length=512)
