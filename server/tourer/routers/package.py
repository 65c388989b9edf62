"""Package router for catalog operations."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import RequiredAuth
from ..core.security import CurrentUser
from ..models.package import Category
from ..schemas.common import Page
from ..schemas.package import CreatePackageRequest, Package, PackageQuery, UpdatePackageRequest
from ..services.package_service import POPULAR_LIMIT, PackageService


router = APIRouter(prefix="/packages", tags=["packages"])

# Define dependencies to avoid B008 linting errors
DB_DEPENDENCY = Depends(get_db)


@router.get("", response_model=Page[Package])
async def search_packages(
    query: Annotated[PackageQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY,
) -> Page[Package]:
    """
    Search active, available packages.

    Supports free-text search, category, difficulty, location, country,
    price and duration filters, sorting and page-number pagination.
    """
    packages, pagination = await PackageService(db).search_packages(query)
    return Page[Package](
        data=[Package.model_validate(package) for package in packages],
        pagination=pagination
    )


@router.get("/categories", response_model=List[Category])
async def list_categories(db: AsyncSession = DB_DEPENDENCY) -> List[Category]:
    """Distinct categories that have at least one active package."""
    return await PackageService(db).get_categories()


@router.get("/popular", response_model=List[Package])
async def popular_packages(
    limit: int = Query(POPULAR_LIMIT, ge=1, le=50),
    db: AsyncSession = DB_DEPENDENCY,
) -> List[Package]:
    """Top rated packages."""
    packages = await PackageService(db).get_popular_packages(limit)
    return [Package.model_validate(package) for package in packages]


@router.get("/slug/{slug}", response_model=Package)
async def get_package_by_slug(slug: str, db: AsyncSession = DB_DEPENDENCY) -> Package:
    package = await PackageService(db).get_package_by_slug_or_raise(slug)
    return Package.model_validate(package)


@router.get("/{package_id}", response_model=Package)
async def get_package(package_id: UUID, db: AsyncSession = DB_DEPENDENCY) -> Package:
    package = await PackageService(db).get_package_by_id_or_raise(package_id)
    return Package.model_validate(package)


@router.post("", response_model=Package, status_code=status.HTTP_201_CREATED)
async def create_package(
    request: CreatePackageRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Package:
    """
    Create a package (admin only).

    The slug is derived from the title when omitted.
    """
    package = await PackageService(db).create_package(request, caller)
    return Package.model_validate(package)


@router.patch("/{package_id}", response_model=Package)
async def update_package(
    package_id: UUID,
    request: UpdatePackageRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> Package:
    """Partially update a package (admin only)."""
    package = await PackageService(db).update_package(package_id, request, caller)
    return Package.model_validate(package)


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(
    package_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> None:
    """Deactivate a package (admin only); its bookings and reviews are kept."""
    await PackageService(db).remove_package(package_id, caller)
