"""Booking service for business logic operations."""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional
from uuid import UUID

from sqlalchemy import String, cast, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import (
    AuthorizationError,
    BadRequestError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from ..core.observability import metrics_collector
from ..core.security import CurrentUser, require_admin
from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..models.package import Package
from ..models.review import Review
from ..models.user import User
from ..schemas.booking import (
    BookingQuery,
    BookingStats,
    CreateBookingRequest,
    UpdateBookingRequest,
    UpdatePaymentRequest,
)
from ..schemas.common import Pagination
from .package_service import PackageService
from .pagination import LIKE_ESCAPE, contains_pattern, paginate
from .updates import settable_changes

logger = logging.getLogger(__name__)

# Allowed forward moves; CANCELLED and COMPLETED are terminal
STATUS_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

# Fields only administrators may change through a booking update
ADMIN_ONLY_FIELDS = frozenset({"payment_status", "payment_id", "total_price", "currency"})

# Bookings in these states hold money and cannot be deleted
UNDELETABLE_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED})

REVENUE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

SORT_COLUMNS = {
    "created_at": Booking.created_at,
    "start_date": Booking.start_date,
    "total_price": Booking.total_price,
}


def can_transition(current: BookingStatus, requested: BookingStatus) -> bool:
    """Whether a booking may move from current to requested status."""
    return current == requested or requested in STATUS_TRANSITIONS[current]


def check_guest_names(guests: int, guest_names: List[str]) -> None:
    """Raise BadRequestError unless there is exactly one name per guest."""
    if len(guest_names) != guests:
        raise BadRequestError(
            detail=f"Expected {guests} guest names, got {len(guest_names)}",
            errors={"guest_names": "Number of guest names must match number of guests"}
        )


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.package_service = PackageService(db)

    async def create_booking(self, request: CreateBookingRequest, caller: CurrentUser) -> Booking:
        """
        Create a PENDING booking for the caller.

        Total price, end date and currency are derived from the package when
        the request omits them.

        Args:
            request: Booking creation request
            caller: Authenticated caller who will own the booking

        Returns:
            Created booking entity with user and package loaded

        Raises:
            NotFoundError: If package not found
            BadRequestError: If the package is inactive or guest names do not
                match the number of guests
        """
        package = await self.package_service.get_package_by_id_or_raise(request.package_id)

        if not package.is_active:
            logger.warning(
                "Booking creation failed - package inactive",
                extra={"package_id": str(package.id), "user_id": str(caller.id)}
            )
            raise BadRequestError(detail=f"Package {package.id} is not available for booking")

        check_guest_names(request.guests, request.guest_names)

        total_price = request.total_price
        if total_price is None:
            total_price = package.price * request.guests

        end_date = request.end_date
        if end_date is None:
            end_date = request.start_date + timedelta(days=package.duration - 1)

        booking = Booking(
            user_id=caller.id,
            package_id=package.id,
            start_date=request.start_date,
            end_date=end_date,
            guests=request.guests,
            guest_names=list(request.guest_names),
            contact_info=(
                request.contact_info.model_dump(mode="json", exclude_none=True)
                if request.contact_info else None
            ),
            notes=request.notes,
            total_price=total_price,
            currency=request.currency or package.currency,
            status=BookingStatus.PENDING,
        )

        self.db.add(booking)
        await self.db.commit()

        metrics_collector.record_booking_created(booking.currency)

        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": str(booking.id),
                "package_id": str(package.id),
                "user_id": str(caller.id),
                "guests": booking.guests,
                "total_price": str(booking.total_price)
            }
        )

        return await self._get_booking_or_raise(booking.id)

    async def list_bookings(
        self,
        query: BookingQuery,
        caller: CurrentUser,
    ) -> tuple[List[Booking], Pagination]:
        """
        List all bookings with search and filters.

        Raises:
            AuthorizationError: If caller is not an admin
        """
        require_admin(caller)
        return await self._search(query, self._build_conditions(query))

    async def list_user_bookings(
        self,
        query: BookingQuery,
        caller: CurrentUser,
    ) -> tuple[List[Booking], Pagination]:
        """List the caller's own bookings; any user_id filter is replaced by the caller."""
        conditions = self._build_conditions(query.model_copy(update={"user_id": None}))
        conditions.append(Booking.user_id == caller.id)
        return await self._search(query, conditions)

    async def get_booking(self, booking_id: UUID, caller: CurrentUser) -> Booking:
        """
        Get a booking visible to the caller.

        Raises:
            NotFoundError: If booking not found
            AuthorizationError: If a non-admin caller does not own the booking
        """
        booking = await self._get_booking_or_raise(booking_id)
        self._check_access(booking, caller)
        return booking

    async def update_booking(
        self,
        booking_id: UUID,
        request: UpdateBookingRequest,
        caller: CurrentUser,
    ) -> Booking:
        """
        Apply a partial update to a booking.

        Non-admin owners may edit trip details and cancel; all other status
        changes and payment, price and currency fields are admin-only.
        Status changes follow STATUS_TRANSITIONS.

        Raises:
            NotFoundError: If booking not found
            AuthorizationError: If the caller may not make this change
            BadRequestError: If the merged guests and guest names disagree
                or the dates are out of order
            InvalidStatusTransitionError: If the status change is not allowed
        """
        booking = await self._get_booking_or_raise(booking_id)
        self._check_access(booking, caller)

        changes = settable_changes(Booking, request.model_dump(mode="json", exclude_unset=True))
        if "total_price" in changes:
            changes["total_price"] = request.total_price

        if not caller.is_admin:
            forbidden = sorted(ADMIN_ONLY_FIELDS.intersection(changes))
            if forbidden:
                logger.warning(
                    "Booking update rejected - admin-only fields",
                    extra={"booking_id": str(booking_id), "user_id": str(caller.id), "fields": forbidden}
                )
                raise AuthorizationError(
                    detail=f"Only administrators may change: {', '.join(forbidden)}"
                )
            if "status" in changes and changes["status"] != BookingStatus.CANCELLED.value:
                raise AuthorizationError(detail="Users may only cancel their bookings")

        guests = changes.get("guests", booking.guests)
        guest_names = changes.get("guest_names", booking.guest_names)
        if "guests" in changes or "guest_names" in changes:
            check_guest_names(guests, guest_names)

        start_date = request.start_date if "start_date" in changes else booking.start_date
        end_date = request.end_date if "end_date" in changes else booking.end_date
        if end_date is not None and end_date < start_date:
            raise BadRequestError(detail="end_date must not be before start_date")
        if "start_date" in changes:
            changes["start_date"] = request.start_date
        if "end_date" in changes:
            changes["end_date"] = request.end_date

        previous_status = BookingStatus(booking.status)
        if "status" in changes:
            requested_status = BookingStatus(changes.pop("status"))
            self._apply_status(booking, requested_status)

        for field, value in changes.items():
            setattr(booking, field, value)

        await self.db.commit()

        current_status = BookingStatus(booking.status)
        if current_status != previous_status:
            metrics_collector.record_status_change(previous_status.value, current_status.value)

        logger.info(
            "Booking updated successfully",
            extra={
                "booking_id": str(booking_id),
                "updated_by": str(caller.id),
                "fields": sorted(request.model_fields_set),
                "status": current_status.value
            }
        )

        return await self._get_booking_or_raise(booking_id)

    async def cancel_booking(self, booking_id: UUID, caller: CurrentUser) -> Booking:
        """Cancel a booking; owners and admins only."""
        return await self.update_booking(
            booking_id, UpdateBookingRequest(status=BookingStatus.CANCELLED), caller
        )

    async def confirm_booking(self, booking_id: UUID, caller: CurrentUser) -> Booking:
        require_admin(caller)
        return await self.update_booking(
            booking_id, UpdateBookingRequest(status=BookingStatus.CONFIRMED), caller
        )

    async def complete_booking(self, booking_id: UUID, caller: CurrentUser) -> Booking:
        require_admin(caller)
        return await self.update_booking(
            booking_id, UpdateBookingRequest(status=BookingStatus.COMPLETED), caller
        )

    async def update_payment_status(
        self,
        booking_id: UUID,
        request: UpdatePaymentRequest,
        caller: CurrentUser,
    ) -> Booking:
        """
        Record a payment status change on a booking.

        Raises:
            AuthorizationError: If caller is not an admin
            NotFoundError: If booking not found
        """
        require_admin(caller)
        booking = await self._get_booking_or_raise(booking_id)

        previous = booking.payment_status
        booking.payment_status = request.payment_status
        if request.payment_id is not None:
            booking.payment_id = request.payment_id

        await self.db.commit()

        logger.info(
            "Booking payment status updated",
            extra={
                "booking_id": str(booking_id),
                "from_payment_status": PaymentStatus(previous).value,
                "to_payment_status": request.payment_status.value,
                "payment_id": request.payment_id
            }
        )

        return await self._get_booking_or_raise(booking_id)

    async def remove_booking(self, booking_id: UUID, caller: CurrentUser) -> None:
        """
        Delete a booking that has not been confirmed or completed.

        Reviews that referenced the booking keep their content and lose the
        booking link.

        Raises:
            NotFoundError: If booking not found
            AuthorizationError: If a non-admin caller does not own the booking
            BadRequestError: If the booking is CONFIRMED or COMPLETED
        """
        booking = await self._get_booking_or_raise(booking_id)
        self._check_access(booking, caller)

        status = BookingStatus(booking.status)
        if status in UNDELETABLE_STATUSES:
            logger.warning(
                "Booking deletion rejected",
                extra={"booking_id": str(booking_id), "status": status.value}
            )
            raise BadRequestError(detail=f"Cannot delete a {status.value} booking")

        await self.db.execute(
            update(Review).where(Review.booking_id == booking.id).values(booking_id=None)
        )
        await self.db.delete(booking)
        await self.db.commit()

        metrics_collector.record_booking_deleted()

        logger.info(
            "Booking deleted",
            extra={"booking_id": str(booking_id), "deleted_by": str(caller.id)}
        )

    async def get_stats(self, caller: CurrentUser) -> BookingStats:
        """
        Booking totals per status and revenue from confirmed and completed bookings.

        Raises:
            AuthorizationError: If caller is not an admin
        """
        require_admin(caller)

        result = await self.db.execute(
            select(Booking.status, func.count(Booking.id)).group_by(Booking.status)
        )
        counts = {BookingStatus(status): count for status, count in result.all()}

        revenue_stmt = select(func.coalesce(func.sum(Booking.total_price), 0)).where(
            Booking.status.in_([s.value for s in REVENUE_STATUSES])
        )
        revenue = (await self.db.execute(revenue_stmt)).scalar_one()

        return BookingStats(
            total_bookings=sum(counts.values()),
            pending_bookings=counts.get(BookingStatus.PENDING, 0),
            confirmed_bookings=counts.get(BookingStatus.CONFIRMED, 0),
            completed_bookings=counts.get(BookingStatus.COMPLETED, 0),
            cancelled_bookings=counts.get(BookingStatus.CANCELLED, 0),
            total_revenue=Decimal(str(revenue)),
        )

    async def get_booking_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """
        Get booking by ID with owner and package loaded.

        Args:
            booking_id: Booking ID to search for

        Returns:
            Booking if found, None otherwise
        """
        stmt = (
            select(Booking)
            .options(selectinload(Booking.user), selectinload(Booking.package))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_booking_or_raise(self, booking_id: UUID) -> Booking:
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            logger.warning(
                "Booking not found",
                extra={"booking_id": str(booking_id)}
            )
            raise NotFoundError(
                resource_type="booking",
                resource_id=str(booking_id)
            )
        return booking

    def _check_access(self, booking: Booking, caller: CurrentUser) -> None:
        if not caller.is_admin and booking.user_id != caller.id:
            logger.warning(
                "Booking access denied",
                extra={"booking_id": str(booking.id), "user_id": str(caller.id)}
            )
            raise AuthorizationError(detail="You can only access your own bookings")

    def _apply_status(self, booking: Booking, requested: BookingStatus) -> None:
        current = BookingStatus(booking.status)
        if not can_transition(current, requested):
            logger.warning(
                "Invalid booking status transition",
                extra={
                    "booking_id": str(booking.id),
                    "current_status": current.value,
                    "requested_status": requested.value
                }
            )
            raise InvalidStatusTransitionError(
                booking_id=str(booking.id),
                current_status=current.value,
                requested_status=requested.value
            )
        booking.status = requested

    def _build_conditions(self, query: BookingQuery) -> list:
        conditions = []

        if query.search:
            pattern = contains_pattern(query.search)
            conditions.append(
                or_(
                    Booking.user.has(
                        or_(
                            User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
                            User.last_name.ilike(pattern, escape=LIKE_ESCAPE),
                            User.email.ilike(pattern, escape=LIKE_ESCAPE),
                        )
                    ),
                    Booking.package.has(Package.title.ilike(pattern, escape=LIKE_ESCAPE)),
                    cast(Booking.guest_names, String).ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        if query.status:
            conditions.append(Booking.status == query.status.value)

        if query.payment_status:
            conditions.append(Booking.payment_status == query.payment_status.value)

        if query.user_id:
            conditions.append(Booking.user_id == query.user_id)

        if query.package_id:
            conditions.append(Booking.package_id == query.package_id)

        return conditions

    async def _search(self, query: BookingQuery, conditions: list) -> tuple[List[Booking], Pagination]:
        column = SORT_COLUMNS[query.sort_by]
        order = column.asc() if query.sort_order == "asc" else column.desc()
        stmt = (
            select(Booking)
            .options(selectinload(Booking.user), selectinload(Booking.package))
            .order_by(order, Booking.id)
        )

        bookings, pagination = await paginate(self.db, stmt, conditions, query)

        logger.info(
            "Booking search completed",
            extra={
                "total_found": pagination.total,
                "page": query.page,
                "search": query.search
            }
        )

        return bookings, pagination
