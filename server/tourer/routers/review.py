"""Review router for package reviews and moderation."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import RequiredAuth
from ..core.security import CurrentUser
from ..schemas.common import Page
from ..schemas.review import AdminReview, AdminReviewQuery, CreateReviewRequest, Review, ReviewQuery
from ..services.review_service import ReviewService


router = APIRouter(tags=["reviews"])

DB_DEPENDENCY = Depends(get_db)


@router.get("/packages/{package_id}/reviews", response_model=Page[Review])
async def list_package_reviews(
    package_id: UUID,
    query: Annotated[ReviewQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY,
) -> Page[Review]:
    """Approved reviews of a package, newest first."""
    reviews, pagination = await ReviewService(db).list_package_reviews(package_id, query)
    return Page[Review](
        data=[Review.model_validate(review) for review in reviews],
        pagination=pagination
    )


@router.post(
    "/packages/{package_id}/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED
)
async def create_review(
    package_id: UUID,
    request: CreateReviewRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Review:
    """
    Review a package.

    One review per user and package. Reviews backed by a completed booking
    are marked verified.
    """
    review = await ReviewService(db).create_review(package_id, request, caller)
    return Review.model_validate(review)


@router.get("/reviews/admin", response_model=Page[AdminReview])
async def list_reviews_for_admin(
    query: Annotated[AdminReviewQuery, Query()],
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Page[AdminReview]:
    """All reviews for moderation (admin only)."""
    reviews, pagination = await ReviewService(db).list_reviews_for_admin(query, caller)
    return Page[AdminReview](
        data=[AdminReview.model_validate(review) for review in reviews],
        pagination=pagination
    )


@router.patch("/reviews/{review_id}/approve", response_model=AdminReview)
async def approve_review(
    review_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> AdminReview:
    review = await ReviewService(db).approve_review(review_id, caller)
    return AdminReview.model_validate(review)


@router.patch("/reviews/{review_id}/reject", response_model=AdminReview)
async def reject_review(
    review_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> AdminReview:
    review = await ReviewService(db).reject_review(review_id, caller)
    return AdminReview.model_validate(review)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> None:
    """Delete a review (author or admin)."""
    await ReviewService(db).delete_review(review_id, caller)
