"""Health and admin dashboard Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .booking import BookingStats


class HealthStatus(str, Enum):
    """Health status enumeration."""
    HEALTHY = "healthy"


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: HealthStatus = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current server time (ISO 8601)")
    version: str = Field("1.0.0", description="API version")


class DashboardResponse(BaseModel):
    """Admin dashboard totals."""

    total_users: int
    active_users: int
    total_packages: int
    active_packages: int
    total_reviews: int
    pending_reviews: int
    bookings: BookingStats
