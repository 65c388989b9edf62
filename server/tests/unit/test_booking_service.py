"""Unit tests for booking service."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from tourer.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from tourer.models.booking import BookingStatus, PaymentStatus
from tourer.schemas.booking import BookingQuery, UpdateBookingRequest, UpdatePaymentRequest
from tourer.services.booking_service import BookingService
from tourer.services.package_service import PackageService


@pytest.mark.asyncio
async def test_create_booking_derives_price_dates_and_currency(user_caller, make_booking):
    """Test omitted price, end date and currency come from the package."""
    booking = await make_booking(user_caller, guests=3)

    assert booking.total_price == Decimal("300")
    assert booking.start_date == date(2024, 1, 10)
    assert booking.end_date == date(2024, 1, 14)
    assert booking.currency == "USD"
    assert booking.status == BookingStatus.PENDING
    assert booking.payment_status == PaymentStatus.PENDING
    assert booking.user_id == user_caller.id
    assert booking.package.slug == "city-tour"
    assert len(booking.guest_names) == booking.guests


@pytest.mark.asyncio
async def test_create_booking_keeps_explicit_values(user_caller, make_booking):
    booking = await make_booking(
        user_caller,
        guests=1,
        end_date=date(2024, 1, 20),
        total_price=Decimal("99.50"),
        currency="EUR"
    )

    assert booking.end_date == date(2024, 1, 20)
    assert booking.total_price == Decimal("99.50")
    assert booking.currency == "EUR"


@pytest.mark.asyncio
async def test_create_booking_guest_names_mismatch(user_caller, make_booking):
    with pytest.raises(BadRequestError):
        await make_booking(user_caller, guests=2, guest_names=["Only One"])


@pytest.mark.asyncio
async def test_create_booking_unknown_package(user_caller, make_booking):
    with pytest.raises(NotFoundError):
        await make_booking(user_caller, package_id=uuid4())


@pytest.mark.asyncio
async def test_create_booking_inactive_package(test_session, admin_caller, user_caller, sample_package, make_booking):
    await PackageService(test_session).remove_package(sample_package.id, admin_caller)

    with pytest.raises(BadRequestError):
        await make_booking(user_caller)


@pytest.mark.asyncio
async def test_status_lifecycle(test_session, admin_caller, user_caller, make_booking):
    """Test PENDING -> CONFIRMED -> COMPLETED and that completed bookings cannot be cancelled."""
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    booking = await service.confirm_booking(booking.id, admin_caller)
    assert booking.status == BookingStatus.CONFIRMED

    booking = await service.complete_booking(booking.id, admin_caller)
    assert booking.status == BookingStatus.COMPLETED

    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        await service.cancel_booking(booking.id, user_caller)

    assert exc_info.value.status_code == 409
    assert exc_info.value.problem_details["code"] == "INVALID_STATUS_TRANSITION"


@pytest.mark.asyncio
async def test_same_status_is_noop(test_session, admin_caller, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    booking = await service.update_booking(
        booking.id, UpdateBookingRequest(status=BookingStatus.PENDING), admin_caller
    )

    assert booking.status == BookingStatus.PENDING


@pytest.mark.asyncio
async def test_pending_cannot_complete(test_session, admin_caller, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    with pytest.raises(InvalidStatusTransitionError):
        await service.complete_booking(booking.id, admin_caller)


@pytest.mark.asyncio
async def test_owner_can_cancel(test_session, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    booking = await service.cancel_booking(booking.id, user_caller)

    assert booking.status == BookingStatus.CANCELLED


@pytest.mark.asyncio
async def test_non_owner_update_forbidden(test_session, user_caller, other_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    with pytest.raises(AuthorizationError):
        await service.update_booking(booking.id, UpdateBookingRequest(notes="mine now"), other_caller)

    with pytest.raises(AuthorizationError):
        await service.get_booking(booking.id, other_caller)


@pytest.mark.asyncio
async def test_owner_cannot_confirm_or_touch_payment(test_session, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    with pytest.raises(AuthorizationError):
        await service.update_booking(
            booking.id, UpdateBookingRequest(status=BookingStatus.CONFIRMED), user_caller
        )

    with pytest.raises(AuthorizationError):
        await service.update_booking(
            booking.id, UpdateBookingRequest(payment_status=PaymentStatus.PAID), user_caller
        )

    with pytest.raises(AuthorizationError):
        await service.update_booking(booking.id, UpdateBookingRequest(payment_id="pi_123"), user_caller)

    with pytest.raises(AuthorizationError):
        await service.confirm_booking(booking.id, user_caller)

    unchanged = await service.get_booking(booking.id, user_caller)
    assert unchanged.status == BookingStatus.PENDING
    assert unchanged.payment_status == PaymentStatus.PENDING
    assert unchanged.payment_id is None


@pytest.mark.asyncio
async def test_update_validates_merged_guest_names(test_session, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller, guests=2)

    with pytest.raises(BadRequestError):
        await service.update_booking(booking.id, UpdateBookingRequest(guests=3), user_caller)

    booking = await service.update_booking(
        booking.id,
        UpdateBookingRequest(guests=3, guest_names=["A", "B", "C"], notes="window seats"),
        user_caller
    )
    assert booking.guests == 3
    assert booking.guest_names == ["A", "B", "C"]
    assert booking.notes == "window seats"


@pytest.mark.asyncio
async def test_update_payment_status(test_session, admin_caller, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    with pytest.raises(AuthorizationError):
        await service.update_payment_status(
            booking.id, UpdatePaymentRequest(payment_status=PaymentStatus.PAID), user_caller
        )

    booking = await service.update_payment_status(
        booking.id,
        UpdatePaymentRequest(payment_status=PaymentStatus.PAID, payment_id="pi_123"),
        admin_caller
    )
    assert booking.payment_status == PaymentStatus.PAID
    assert booking.payment_id == "pi_123"


@pytest.mark.asyncio
async def test_remove_booking_by_status(test_session, admin_caller, user_caller, make_booking):
    """Test PENDING and CANCELLED bookings can be deleted but CONFIRMED and COMPLETED cannot."""
    service = BookingService(test_session)

    pending = await make_booking(user_caller)
    await service.remove_booking(pending.id, user_caller)
    assert await service.get_booking_by_id(pending.id) is None

    cancelled = await make_booking(user_caller)
    await service.cancel_booking(cancelled.id, user_caller)
    await service.remove_booking(cancelled.id, user_caller)
    assert await service.get_booking_by_id(cancelled.id) is None

    confirmed = await make_booking(user_caller)
    await service.confirm_booking(confirmed.id, admin_caller)
    with pytest.raises(BadRequestError):
        await service.remove_booking(confirmed.id, admin_caller)

    await service.complete_booking(confirmed.id, admin_caller)
    with pytest.raises(BadRequestError):
        await service.remove_booking(confirmed.id, user_caller)


@pytest.mark.asyncio
async def test_list_bookings_search_and_scope(test_session, admin_caller, user_caller, other_caller, make_booking):
    service = BookingService(test_session)
    await make_booking(user_caller, guest_names=["Zelda Fitzgerald", "Scott Fitzgerald"])
    await make_booking(other_caller, guests=1, guest_names=["Marco Polo"])

    with pytest.raises(AuthorizationError):
        await service.list_bookings(BookingQuery(), user_caller)

    bookings, pagination = await service.list_bookings(BookingQuery(), admin_caller)
    assert pagination.total == 2

    bookings, _ = await service.list_bookings(BookingQuery(search="zelda"), admin_caller)
    assert [b.user_id for b in bookings] == [user_caller.id]

    bookings, _ = await service.list_bookings(BookingQuery(search="OMAR@"), admin_caller)
    assert [b.user_id for b in bookings] == [other_caller.id]

    bookings, pagination = await service.list_bookings(BookingQuery(search="city tour"), admin_caller)
    assert pagination.total == 2

    # user_id filter is ignored for the caller's own list
    bookings, pagination = await service.list_user_bookings(
        BookingQuery(user_id=other_caller.id), user_caller
    )
    assert pagination.total == 1
    assert bookings[0].user_id == user_caller.id


@pytest.mark.asyncio
async def test_get_stats(test_session, admin_caller, user_caller, make_booking):
    service = BookingService(test_session)
    confirmed = await make_booking(user_caller, guests=1)
    completed = await make_booking(user_caller, guests=2)
    cancelled = await make_booking(user_caller, guests=3)
    await make_booking(user_caller, guests=1)

    await service.confirm_booking(confirmed.id, admin_caller)
    await service.confirm_booking(completed.id, admin_caller)
    await service.complete_booking(completed.id, admin_caller)
    await service.cancel_booking(cancelled.id, user_caller)

    with pytest.raises(AuthorizationError):
        await service.get_stats(user_caller)

    stats = await service.get_stats(admin_caller)

    assert stats.total_bookings == 4
    assert stats.pending_bookings == 1
    assert stats.confirmed_bookings == 1
    assert stats.completed_bookings == 1
    assert stats.cancelled_bookings == 1
    assert stats.total_revenue == Decimal("300")


@pytest.mark.asyncio
async def test_update_null_clears_nullable_fields(test_session, admin_caller, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller, notes="vegetarian")
    await service.update_payment_status(
        booking.id,
        UpdatePaymentRequest(payment_status=PaymentStatus.PAID, payment_id="pi_123"),
        admin_caller
    )

    booking = await service.update_booking(
        booking.id,
        UpdateBookingRequest(payment_id=None, notes=None, end_date=None, status=None),
        admin_caller
    )

    assert booking.payment_id is None
    assert booking.notes is None
    assert booking.end_date is None
    assert booking.status == BookingStatus.PENDING
    assert booking.payment_status == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_owner_cannot_clear_payment_id(test_session, user_caller, make_booking):
    service = BookingService(test_session)
    booking = await make_booking(user_caller)

    with pytest.raises(AuthorizationError):
        await service.update_booking(booking.id, UpdateBookingRequest(payment_id=None), user_caller)


@pytest.mark.asyncio
async def test_search_matches_wildcards_literally(test_session, admin_caller, user_caller, make_booking):
    service = BookingService(test_session)
    await make_booking(user_caller, guests=1, guest_names=["Ann_Lee"])
    await make_booking(user_caller, guests=1, guest_names=["AnnXLee"])

    bookings, pagination = await service.list_bookings(BookingQuery(search="ann_lee"), admin_caller)

    assert pagination.total == 1
    assert bookings[0].guest_names == ["Ann_Lee"]
