"""User and authentication Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from ..models.user import UserRole


class RegisterRequest(BaseModel):
    """Request schema for email/password registration."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=8, max_length=128, description="Plain-text password")
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    """Request schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserSummary(BaseModel):
    """Public view of a user embedded in other responses."""

    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole

    class Config:
        from_attributes = True


class AuthorSummary(BaseModel):
    """Review author as shown publicly (no email)."""

    id: UUID
    first_name: str | None = None
    last_name: str | None = None
    photo_url: str | None = None

    class Config:
        from_attributes = True


class UserProfile(UserSummary):
    """Profile of the authenticated user."""

    photo_url: str | None = None
    provider: str
    is_active: bool


class TokenResponse(BaseModel):
    """Tokens issued on register/login."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserSummary


class AccessTokenResponse(BaseModel):
    """Fresh access token issued on refresh."""

    access_token: str
    token_type: str = "bearer"
