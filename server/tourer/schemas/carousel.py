"""Carousel-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.carousel import ActionType


class CreateCarouselItemRequest(BaseModel):
    """Request schema for creating a carousel item."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    image_url: str = Field(..., min_length=1, max_length=1024)
    action_type: ActionType = ActionType.INTERNAL
    action_value: str = Field(..., min_length=1, max_length=1024, description="Route or URL to open")
    is_active: bool = True
    sort_order: int = Field(0, ge=0)


class UpdateCarouselItemRequest(BaseModel):
    """Request schema for partially updating a carousel item."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    image_url: str | None = Field(None, min_length=1, max_length=1024)
    action_type: ActionType | None = None
    action_value: str | None = Field(None, min_length=1, max_length=1024)
    is_active: bool | None = None
    sort_order: int | None = Field(None, ge=0)


class CarouselItem(BaseModel):
    """Carousel item response schema."""

    id: UUID
    title: str
    description: str | None = None
    image_url: str
    action_type: ActionType
    action_value: str
    is_active: bool
    sort_order: int
    created_at: datetime

    class Config:
        from_attributes = True
