"""Review model definition."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base, utcnow

if TYPE_CHECKING:
    from .booking import Booking
    from .package import Package
    from .user import User


class Review(Base):
    """A user's review of a package."""

    __tablename__ = "reviews"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Foreign keys
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    package_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id"),
        nullable=False,
        index=True
    )
    # Set when the author completed a booking of this package
    booking_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True
    )

    # Content
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Moderation
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    helpful_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "package_id", name="uq_review_user_package"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
        CheckConstraint("helpful_votes >= 0", name="ck_review_helpful_votes_non_negative"),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="reviews")
    package: Mapped["Package"] = relationship("Package", back_populates="reviews")
    booking: Mapped["Booking | None"] = relationship("Booking", back_populates="reviews")

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, package_id={self.package_id}, user_id={self.user_id}, "
            f"rating={self.rating}, approved={self.is_approved})>"
        )
