"""Package model definition."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base, utcnow

if TYPE_CHECKING:
    from .booking import Booking
    from .review import Review


class Category(str, Enum):
    """Package category enumeration."""
    ADVENTURE = "ADVENTURE"
    CULTURAL = "CULTURAL"
    NATURE = "NATURE"
    HISTORICAL = "HISTORICAL"
    BEACH = "BEACH"
    MOUNTAIN = "MOUNTAIN"
    CITY = "CITY"
    WILDLIFE = "WILDLIFE"
    LUXURY = "LUXURY"
    BUDGET = "BUDGET"
    FAMILY = "FAMILY"
    ROMANTIC = "ROMANTIC"


class Difficulty(str, Enum):
    """Package difficulty enumeration."""
    EASY = "EASY"
    MODERATE = "MODERATE"
    CHALLENGING = "CHALLENGING"
    EXTREME = "EXTREME"


class Package(Base):
    """Travel package offered for booking."""

    __tablename__ = "packages"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Listing information
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    # Capacity and trip shape
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[Difficulty] = mapped_column(
        String(20),
        nullable=False,
        default=Difficulty.EASY,
        index=True
    )
    category: Mapped[Category] = mapped_column(
        String(20),
        nullable=False,
        default=Category.CULTURAL,
        index=True
    )

    # Location
    location_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    coordinates: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Media and content
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cover_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    highlights: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    includes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    excludes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    itinerary: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Availability window
    available_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    available_to: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Cached review aggregate, recomputed from approved reviews
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Flags
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_package_price_non_negative"),
        CheckConstraint("duration >= 1", name="ck_package_duration_positive"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_package_rating_range"),
        CheckConstraint("review_count >= 0", name="ck_package_review_count_non_negative"),
        CheckConstraint("length(currency) = 3", name="ck_package_currency_length"),
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="package")
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="package")

    def __repr__(self) -> str:
        return f"<Package(id={self.id}, title='{self.title}', slug='{self.slug}')>"
