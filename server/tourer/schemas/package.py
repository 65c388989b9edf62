"""Package-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from ..models.package import Category, Difficulty
from .common import PageQuery

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
CURRENCY_PATTERN = r"^[A-Z]{3}$"


class ItineraryDay(BaseModel):
    """One day of a package itinerary."""

    day: int = Field(..., ge=1, description="1-based day number")
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    activities: list[str] = Field(default_factory=list)
    meals: list[str] = Field(default_factory=list)
    accommodation: str | None = Field(None, max_length=255)


class PackageFields(BaseModel):
    """Fields shared by package create and update requests."""

    description: str | None = Field(None, max_length=10000)
    short_description: str | None = Field(None, max_length=500)
    original_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_guests: int | None = Field(None, ge=1)
    min_age: int | None = Field(None, ge=0)
    country: str | None = Field(None, max_length=100)
    coordinates: str | None = Field(None, max_length=100)
    images: list[str] | None = None
    cover_image: str | None = Field(None, max_length=1024)
    highlights: list[str] | None = None
    includes: list[str] | None = None
    excludes: list[str] | None = None
    itinerary: list[ItineraryDay] | None = None
    tags: list[str] | None = None
    available_from: date | None = None
    available_to: date | None = None

    @model_validator(mode="after")
    def check_availability_window(self):
        if self.available_from and self.available_to and self.available_to < self.available_from:
            raise ValueError("available_to must not be before available_from")
        return self


class CreatePackageRequest(PackageFields):
    """Request schema for creating a package."""

    title: str = Field(..., min_length=1, max_length=255, description="Package title")
    slug: str | None = Field(
        None,
        min_length=1,
        max_length=255,
        pattern=SLUG_PATTERN,
        description="URL-friendly slug; derived from the title when omitted"
    )
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field("USD", pattern=CURRENCY_PATTERN)
    duration: int = Field(..., ge=1, description="Duration in days")
    difficulty: Difficulty = Difficulty.EASY
    category: Category = Category.CULTURAL
    location_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True
    is_available: bool = True


class UpdatePackageRequest(PackageFields):
    """Request schema for partially updating a package."""

    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    currency: str | None = Field(None, pattern=CURRENCY_PATTERN)
    duration: int | None = Field(None, ge=1)
    difficulty: Difficulty | None = None
    category: Category | None = None
    location_name: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None
    is_available: bool | None = None


class PackageQuery(PageQuery):
    """Query parameters for searching packages."""

    search: str | None = Field(None, max_length=255, description="Matches title, description or location")
    category: Category | None = None
    difficulty: Difficulty | None = None
    location: str | None = Field(None, max_length=255, description="Location name substring")
    country: str | None = Field(None, max_length=100, description="Country substring")
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)
    min_duration: int | None = Field(None, ge=1)
    max_duration: int | None = Field(None, ge=1)
    sort_by: Literal["created_at", "price", "duration", "rating", "title"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class Package(BaseModel):
    """Package response schema."""

    id: UUID
    title: str
    slug: str
    description: str | None = None
    short_description: str | None = None
    price: Decimal
    original_price: Decimal | None = None
    currency: str
    duration: int
    max_guests: int | None = None
    min_age: int | None = None
    difficulty: Difficulty
    category: Category
    location_name: str
    country: str | None = None
    coordinates: str | None = None
    images: list[str] = Field(default_factory=list)
    cover_image: str | None = None
    highlights: list[str] = Field(default_factory=list)
    includes: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)
    itinerary: list[ItineraryDay] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    available_from: date | None = None
    available_to: date | None = None
    rating: float
    review_count: int
    is_active: bool
    is_available: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PackageSummary(BaseModel):
    """Compact package view embedded in bookings and reviews."""

    id: UUID
    title: str
    slug: str
    location_name: str
    duration: int
    cover_image: str | None = None
    price: Decimal
    currency: str

    class Config:
        from_attributes = True
