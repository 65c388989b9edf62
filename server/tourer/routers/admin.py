"""Admin router for dashboard aggregates."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import RequiredAuth
from ..core.security import CurrentUser
from ..schemas.health import DashboardResponse
from ..services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])

DB_DEPENDENCY = Depends(get_db)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> DashboardResponse:
    """User, package, review and booking totals (admin only)."""
    return await AdminService(db).get_dashboard(caller)
