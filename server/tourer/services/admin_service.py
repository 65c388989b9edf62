"""Admin dashboard aggregates."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.security import CurrentUser, require_admin
from ..models.package import Package
from ..models.review import Review
from ..models.user import User
from ..schemas.health import DashboardResponse
from .booking_service import BookingService

logger = logging.getLogger(__name__)


class AdminService:
    """Service for the admin dashboard."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.booking_service = BookingService(db)

    async def get_dashboard(self, caller: CurrentUser) -> DashboardResponse:
        """
        Totals across users, packages, reviews and bookings.

        Raises:
            AuthorizationError: If caller is not an admin
        """
        require_admin(caller)

        return DashboardResponse(
            total_users=await self._count(select(func.count(User.id))),
            active_users=await self._count(
                select(func.count(User.id)).where(User.is_active.is_(True))
            ),
            total_packages=await self._count(select(func.count(Package.id))),
            active_packages=await self._count(
                select(func.count(Package.id)).where(Package.is_active.is_(True))
            ),
            total_reviews=await self._count(select(func.count(Review.id))),
            pending_reviews=await self._count(
                select(func.count(Review.id)).where(Review.is_approved.is_(False))
            ),
            bookings=await self.booking_service.get_stats(caller),
        )

    async def _count(self, stmt) -> int:
        return (await self.db.execute(stmt)).scalar_one()
