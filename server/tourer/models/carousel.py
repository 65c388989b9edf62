"""Carousel item model definition."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, utcnow


class ActionType(str, Enum):
    """What tapping a carousel item does."""
    INTERNAL = "INTERNAL"
    EXTERNAL = "EXTERNAL"


class CarouselItem(Base):
    """Promotional entry shown on the home carousel."""

    __tablename__ = "carousel_items"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    action_type: Mapped[ActionType] = mapped_column(
        String(20),
        nullable=False,
        default=ActionType.INTERNAL
    )
    action_value: Mapped[str] = mapped_column(String(1024), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

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

    __table_args__ = (
        CheckConstraint("sort_order >= 0", name="ck_carousel_sort_order_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<CarouselItem(id={self.id}, title='{self.title}', sort_order={self.sort_order})>"
