"""Review-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .common import PageQuery
from .user import AuthorSummary

MAX_REVIEW_IMAGES = 5


class CreateReviewRequest(BaseModel):
    """Request schema for reviewing a package."""

    rating: int = Field(..., ge=1, le=5, description="Star rating")
    title: str | None = Field(None, max_length=255)
    comment: str | None = Field(None, max_length=5000)
    images: list[str] = Field(default_factory=list, max_length=MAX_REVIEW_IMAGES)


class ReviewQuery(PageQuery):
    """Query parameters for a package's public reviews."""

    rating: int | None = Field(None, ge=1, le=5)
    verified: bool | None = None


class AdminReviewQuery(PageQuery):
    """Query parameters for the moderation list."""

    is_approved: bool | None = None
    is_verified: bool | None = None
    rating: int | None = Field(None, ge=1, le=5)
    package_id: UUID | None = None


class ReviewPackage(BaseModel):
    """Package reference shown on moderation lists."""

    id: UUID
    title: str
    location_name: str

    class Config:
        from_attributes = True


class Review(BaseModel):
    """Review response schema."""

    id: UUID
    package_id: UUID
    user_id: UUID
    booking_id: UUID | None = None
    rating: int
    title: str | None = None
    comment: str | None = None
    images: list[str] = Field(default_factory=list)
    is_approved: bool
    is_verified: bool
    helpful_votes: int
    created_at: datetime
    user: AuthorSummary | None = None

    class Config:
        from_attributes = True


class AdminReview(Review):
    """Review with its package, for moderation."""

    package: ReviewPackage | None = None
