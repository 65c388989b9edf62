"""Review service: reviews, moderation and package rating aggregation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import AuthorizationError, BadRequestError, NotFoundError
from ..core.observability import metrics_collector
from ..core.security import CurrentUser, require_admin
from ..models.booking import Booking, BookingStatus
from ..models.package import Package
from ..models.review import Review
from ..schemas.common import Pagination
from ..schemas.review import AdminReviewQuery, CreateReviewRequest, ReviewQuery
from .package_service import PackageService
from .pagination import paginate

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Service for review-related operations.

    Every mutation recomputes the reviewed package's cached rating and
    review_count from its approved reviews inside the same transaction,
    while holding the package lock.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.package_service = PackageService(db)

    async def create_review(
        self,
        package_id: UUID,
        request: CreateReviewRequest,
        caller: CurrentUser,
    ) -> Review:
        """
        Review a package as the caller.

        The review is verified when the caller has a COMPLETED booking for
        the package; that booking is linked to the review.

        Args:
            package_id: Package being reviewed
            request: Rating and review content
            caller: Authenticated author

        Returns:
            Created review with author loaded

        Raises:
            NotFoundError: If package not found
            BadRequestError: If the caller already reviewed this package
        """
        package = await self.package_service.get_package_with_lock(package_id)

        existing = await self.db.execute(
            select(Review.id).where(Review.user_id == caller.id, Review.package_id == package_id)
        )
        if existing.scalar_one_or_none():
            logger.warning(
                "Review creation failed - already reviewed",
                extra={"package_id": str(package_id), "user_id": str(caller.id)}
            )
            raise BadRequestError(detail="You have already reviewed this package")

        completed = await self.db.execute(
            select(Booking.id)
            .where(
                Booking.user_id == caller.id,
                Booking.package_id == package_id,
                Booking.status == BookingStatus.COMPLETED.value,
            )
            .order_by(Booking.created_at.desc())
            .limit(1)
        )
        booking_id = completed.scalar_one_or_none()

        review = Review(
            user_id=caller.id,
            package_id=package_id,
            booking_id=booking_id,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
            images=list(request.images),
            is_verified=booking_id is not None,
        )

        try:
            self.db.add(review)
            await self.db.flush()
            await self._recompute_rating(package)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Review creation failed due to integrity constraint",
                extra={"package_id": str(package_id), "user_id": str(caller.id), "error": str(e)}
            )
            raise BadRequestError(detail="You have already reviewed this package")

        metrics_collector.record_review_created(review.is_verified)

        logger.info(
            "Review created successfully",
            extra={
                "review_id": str(review.id),
                "package_id": str(package_id),
                "user_id": str(caller.id),
                "rating": review.rating,
                "verified": review.is_verified
            }
        )

        return await self._get_review_or_raise(review.id)

    async def approve_review(self, review_id: UUID, caller: CurrentUser) -> Review:
        """
        Approve a review and recompute its package's rating.

        Raises:
            AuthorizationError: If caller is not an admin
            NotFoundError: If review not found
        """
        return await self._set_approval(review_id, True, caller)

    async def reject_review(self, review_id: UUID, caller: CurrentUser) -> Review:
        """
        Hide a review from the public listing and recompute its package's rating.

        Raises:
            AuthorizationError: If caller is not an admin
            NotFoundError: If review not found
        """
        return await self._set_approval(review_id, False, caller)

    async def delete_review(self, review_id: UUID, caller: CurrentUser) -> None:
        """
        Delete a review and recompute its package's rating.

        Raises:
            NotFoundError: If review not found
            AuthorizationError: If caller is neither the author nor an admin
        """
        review = await self._get_review_or_raise(review_id)

        if not caller.is_admin and review.user_id != caller.id:
            logger.warning(
                "Review deletion denied",
                extra={"review_id": str(review_id), "user_id": str(caller.id)}
            )
            raise AuthorizationError(detail="You can only delete your own reviews")

        package = await self.package_service.get_package_with_lock(review.package_id)

        await self.db.delete(review)
        await self.db.flush()
        await self._recompute_rating(package)
        await self.db.commit()

        metrics_collector.record_review_deleted()

        logger.info(
            "Review deleted",
            extra={
                "review_id": str(review_id),
                "package_id": str(package.id),
                "deleted_by": str(caller.id)
            }
        )

    async def list_package_reviews(
        self,
        package_id: UUID,
        query: ReviewQuery,
    ) -> tuple[List[Review], Pagination]:
        """
        Approved reviews of a package, newest first.

        Raises:
            NotFoundError: If package not found
        """
        await self.package_service.get_package_by_id_or_raise(package_id)

        conditions = [Review.package_id == package_id, Review.is_approved.is_(True)]

        if query.rating is not None:
            conditions.append(Review.rating == query.rating)

        if query.verified is not None:
            conditions.append(Review.is_verified.is_(query.verified))

        stmt = (
            select(Review)
            .options(selectinload(Review.user))
            .order_by(Review.created_at.desc(), Review.id)
        )
        return await paginate(self.db, stmt, conditions, query)

    async def list_reviews_for_admin(
        self,
        query: AdminReviewQuery,
        caller: CurrentUser,
    ) -> tuple[List[Review], Pagination]:
        """
        All reviews for moderation, newest first.

        Raises:
            AuthorizationError: If caller is not an admin
        """
        require_admin(caller)

        conditions = []

        if query.is_approved is not None:
            conditions.append(Review.is_approved.is_(query.is_approved))

        if query.is_verified is not None:
            conditions.append(Review.is_verified.is_(query.is_verified))

        if query.rating is not None:
            conditions.append(Review.rating == query.rating)

        if query.package_id:
            conditions.append(Review.package_id == query.package_id)

        stmt = (
            select(Review)
            .options(selectinload(Review.user), selectinload(Review.package))
            .order_by(Review.created_at.desc(), Review.id)
        )
        return await paginate(self.db, stmt, conditions, query)

    async def recalculate_all(self) -> int:
        """
        Recompute the cached rating of every package.

        Returns:
            Number of packages whose aggregate changed
        """
        result = await self.db.execute(select(Package.id).order_by(Package.created_at))
        changed = 0

        for package_id in result.scalars().all():
            package = await self.package_service.get_package_with_lock(package_id)
            before = (package.rating, package.review_count)
            await self._recompute_rating(package)
            if (package.rating, package.review_count) != before:
                changed += 1
                logger.info(
                    "Package rating corrected",
                    extra={
                        "package_id": str(package_id),
                        "previous_rating": before[0],
                        "previous_review_count": before[1],
                        "rating": package.rating,
                        "review_count": package.review_count
                    }
                )
            await self.db.commit()

        return changed

    async def get_review_by_id(self, review_id: UUID) -> Optional[Review]:
        stmt = (
            select(Review)
            .options(selectinload(Review.user), selectinload(Review.package))
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_review_or_raise(self, review_id: UUID) -> Review:
        review = await self.get_review_by_id(review_id)
        if not review:
            logger.warning(
                "Review not found",
                extra={"review_id": str(review_id)}
            )
            raise NotFoundError(
                resource_type="review",
                resource_id=str(review_id)
            )
        return review

    async def _set_approval(self, review_id: UUID, approved: bool, caller: CurrentUser) -> Review:
        require_admin(caller)
        review = await self._get_review_or_raise(review_id)
        package = await self.package_service.get_package_with_lock(review.package_id)

        review.is_approved = approved
        await self.db.flush()
        await self._recompute_rating(package)
        await self.db.commit()

        logger.info(
            "Review moderation updated",
            extra={
                "review_id": str(review_id),
                "package_id": str(package.id),
                "is_approved": approved,
                "moderated_by": str(caller.id)
            }
        )

        return await self._get_review_or_raise(review_id)

    async def _recompute_rating(self, package: Package) -> None:
        # Must run inside the caller's transaction, after the review change is flushed
        stmt = select(func.avg(Review.rating), func.count(Review.id)).where(
            Review.package_id == package.id,
            Review.is_approved.is_(True),
        )
        average, count = (await self.db.execute(stmt)).one()

        package.rating = float(average) if average is not None else 0.0
        package.review_count = count

        metrics_collector.record_rating_recomputed()
