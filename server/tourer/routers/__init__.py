"""FastAPI routers package."""

from .admin import router as admin_router
from .auth import router as auth_router
from .booking import router as booking_router
from .carousel import router as carousel_router
from .health import router as health_router
from .metrics import router as metrics_router
from .package import router as package_router
from .review import router as review_router

__all__ = [
    "admin_router",
    "auth_router",
    "booking_router",
    "carousel_router",
    "health_router",
    "metrics_router",
    "package_router",
    "review_router",
]
