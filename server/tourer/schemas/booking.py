"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from ..models.booking import BookingStatus, PaymentStatus
from .common import PageQuery
from .package import CURRENCY_PATTERN, PackageSummary
from .user import UserSummary

MAX_GUESTS_PER_BOOKING = 20


class ContactInfo(BaseModel):
    """Contact details attached to a booking."""

    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    special_requirements: str | None = Field(None, max_length=2000)


class CreateBookingRequest(BaseModel):
    """Request schema for creating a booking."""

    package_id: UUID = Field(..., description="Package to book")
    start_date: date = Field(..., description="First day of the trip")
    end_date: date | None = Field(None, description="Last day; derived from package duration when omitted")
    guests: int = Field(..., ge=1, le=MAX_GUESTS_PER_BOOKING, description="Number of travellers")
    guest_names: list[str] = Field(..., description="One name per guest")
    contact_info: ContactInfo | None = None
    notes: str | None = Field(None, max_length=2000)
    total_price: Decimal | None = Field(
        None,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Derived from package price x guests when omitted"
    )
    currency: str | None = Field(None, pattern=CURRENCY_PATTERN)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class UpdateBookingRequest(BaseModel):
    """
    Request schema for partially updating a booking.

    Owners may change trip details and cancel. Status (other than
    CANCELLED), payment fields, price and currency are admin-only.
    """

    start_date: date | None = None
    end_date: date | None = None
    guests: int | None = Field(None, ge=1, le=MAX_GUESTS_PER_BOOKING)
    guest_names: list[str] | None = None
    contact_info: ContactInfo | None = None
    notes: str | None = Field(None, max_length=2000)
    total_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    currency: str | None = Field(None, pattern=CURRENCY_PATTERN)
    status: BookingStatus | None = None
    payment_status: PaymentStatus | None = None
    payment_id: str | None = Field(None, max_length=255)


class UpdatePaymentRequest(BaseModel):
    """Request schema for recording a payment status change."""

    payment_status: PaymentStatus
    payment_id: str | None = Field(None, max_length=255)


class BookingQuery(PageQuery):
    """Query parameters for listing bookings."""

    search: str | None = Field(
        None,
        max_length=255,
        description="Matches owner name/email, package title or guest names"
    )
    status: BookingStatus | None = None
    payment_status: PaymentStatus | None = None
    user_id: UUID | None = None
    package_id: UUID | None = None
    sort_by: Literal["created_at", "start_date", "total_price"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class Booking(BaseModel):
    """Booking response schema."""

    id: UUID
    user_id: UUID
    package_id: UUID
    start_date: date
    end_date: date | None = None
    guests: int
    guest_names: list[str]
    contact_info: ContactInfo | None = None
    notes: str | None = None
    total_price: Decimal
    currency: str
    status: BookingStatus
    payment_status: PaymentStatus
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None
    package: PackageSummary | None = None

    class Config:
        from_attributes = True


class BookingStats(BaseModel):
    """Admin dashboard booking aggregates."""

    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    total_revenue: Decimal
