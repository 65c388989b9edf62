"""Booking router for booking operations."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import RequiredAuth
from ..core.security import CurrentUser
from ..schemas.booking import (
    Booking,
    BookingQuery,
    BookingStats,
    CreateBookingRequest,
    UpdateBookingRequest,
    UpdatePaymentRequest,
)
from ..schemas.common import Page
from ..services.booking_service import BookingService


router = APIRouter(prefix="/bookings", tags=["bookings"])

# Define dependencies to avoid B008 linting errors
DB_DEPENDENCY = Depends(get_db)


def _to_page(bookings, pagination) -> Page[Booking]:
    return Page[Booking](
        data=[Booking.model_validate(booking) for booking in bookings],
        pagination=pagination
    )


@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: CreateBookingRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    """
    Book a package for the authenticated user.

    Omitted total price, end date and currency are derived from the package.
    """
    booking = await BookingService(db).create_booking(request, caller)
    return Booking.model_validate(booking)


@router.get("", response_model=Page[Booking])
async def list_bookings(
    query: Annotated[BookingQuery, Query()],
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Page[Booking]:
    """Search all bookings (admin only)."""
    bookings, pagination = await BookingService(db).list_bookings(query, caller)
    return _to_page(bookings, pagination)


@router.get("/stats", response_model=BookingStats)
async def booking_stats(
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> BookingStats:
    """Booking totals and revenue (admin only)."""
    return await BookingService(db).get_stats(caller)


@router.get("/user-bookings", response_model=Page[Booking])
@router.get("/my-bookings", response_model=Page[Booking], include_in_schema=False)
async def list_user_bookings(
    query: Annotated[BookingQuery, Query()],
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Page[Booking]:
    """The authenticated user's own bookings."""
    bookings, pagination = await BookingService(db).list_user_bookings(query, caller)
    return _to_page(bookings, pagination)


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(
    booking_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    booking = await BookingService(db).get_booking(booking_id, caller)
    return Booking.model_validate(booking)


@router.patch("/{booking_id}", response_model=Booking)
async def update_booking(
    booking_id: UUID,
    request: UpdateBookingRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    """
    Partially update a booking.

    Owners may change trip details and cancel; status, payment, price and
    currency changes are otherwise reserved for admins.
    """
    booking = await BookingService(db).update_booking(booking_id, request, caller)
    return Booking.model_validate(booking)


@router.patch("/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(
    booking_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    booking = await BookingService(db).cancel_booking(booking_id, caller)
    return Booking.model_validate(booking)


@router.patch("/{booking_id}/confirm", response_model=Booking)
async def confirm_booking(
    booking_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    booking = await BookingService(db).confirm_booking(booking_id, caller)
    return Booking.model_validate(booking)


@router.patch("/{booking_id}/complete", response_model=Booking)
async def complete_booking(
    booking_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    booking = await BookingService(db).complete_booking(booking_id, caller)
    return Booking.model_validate(booking)


@router.patch("/{booking_id}/payment", response_model=Booking)
async def update_payment_status(
    booking_id: UUID,
    request: UpdatePaymentRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Booking:
    """Record a payment status change (admin only)."""
    booking = await BookingService(db).update_payment_status(booking_id, request, caller)
    return Booking.model_validate(booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> None:
    """Delete a pending or cancelled booking (owner or admin)."""
    await BookingService(db).remove_booking(booking_id, caller)
