"""Service layer package."""

from .admin_service import AdminService
from .auth_service import AuthService
from .booking_service import BookingService
from .carousel_service import CarouselService
from .package_service import PackageService
from .review_service import ReviewService

__all__ = [
    "AdminService",
    "AuthService",
    "BookingService",
    "CarouselService",
    "PackageService",
    "ReviewService",
]
