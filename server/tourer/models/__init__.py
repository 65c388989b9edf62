"""Models module exporting all database models."""

from .booking import Booking, BookingStatus, PaymentStatus
from .carousel import ActionType, CarouselItem
from .package import Category, Difficulty, Package
from .review import Review
from .user import AuthProvider, User, UserRole

__all__ = [
    # Accounts
    "User",
    "UserRole",
    "AuthProvider",

    # Catalog
    "Package",
    "Category",
    "Difficulty",

    # Booking entities
    "Booking",
    "BookingStatus",
    "PaymentStatus",

    # Reviews
    "Review",

    # Promotional content
    "CarouselItem",
    "ActionType",
]
