"""Package service for catalog operations."""

import logging
import re
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..core.security import CurrentUser, require_admin
from ..models.package import Category, Package
from ..schemas.common import Pagination
from ..schemas.package import CreatePackageRequest, PackageQuery, UpdatePackageRequest
from .pagination import LIKE_ESCAPE, contains_pattern, paginate
from .updates import settable_changes

logger = logging.getLogger(__name__)

POPULAR_LIMIT = 6

SORT_COLUMNS = {
    "created_at": Package.created_at,
    "price": Package.price,
    "duration": Package.duration,
    "rating": Package.rating,
    "title": Package.title,
}


def generate_slug(title: str) -> str:
    """
    Derive a URL slug from a title.

    Lowercases, collapses every run of characters outside [a-z0-9] into a
    single hyphen and trims hyphens from both ends, so "City Tour!!"
    becomes "city-tour".
    """
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


class PackageService:
    """Service for package-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_package(self, request: CreatePackageRequest, caller: CurrentUser) -> Package:
        """
        Create a new package.

        Args:
            request: Package creation request
            caller: Authenticated caller (must be admin)

        Returns:
            Created package entity

        Raises:
            AuthorizationError: If caller is not an admin
            BadRequestError: If no slug can be derived from the title
            ConflictError: If a package with the same slug already exists
        """
        require_admin(caller)

        slug = request.slug or generate_slug(request.title)
        if not slug:
            raise BadRequestError(detail=f"Cannot derive a slug from title '{request.title}'")

        await self._ensure_slug_available(slug)

        data = request.model_dump(exclude={"slug"}, exclude_none=True)
        package = Package(slug=slug, **data)

        try:
            self.db.add(package)
            await self.db.commit()
            await self.db.refresh(package)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Package creation failed due to integrity constraint",
                extra={"slug": slug, "error": str(e)}
            )
            raise ConflictError(detail=f"Package with slug '{slug}' already exists")

        logger.info(
            "Package created successfully",
            extra={
                "package_id": str(package.id),
                "slug": package.slug,
                "created_by": str(caller.id)
            }
        )

        return package

    async def search_packages(self, query: PackageQuery) -> tuple[List[Package], Pagination]:
        """
        Search active, available packages.

        Args:
            query: Filters, sorting and page

        Returns:
            Tuple of (packages on the page, pagination metadata)
        """
        conditions = [Package.is_active.is_(True), Package.is_available.is_(True)]

        if query.search:
            pattern = contains_pattern(query.search)
            conditions.append(
                or_(
                    Package.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Package.description.ilike(pattern, escape=LIKE_ESCAPE),
                    Package.location_name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        if query.category:
            conditions.append(Package.category == query.category.value)

        if query.difficulty:
            conditions.append(Package.difficulty == query.difficulty.value)

        if query.location:
            conditions.append(
                Package.location_name.ilike(contains_pattern(query.location), escape=LIKE_ESCAPE)
            )

        if query.country:
            conditions.append(
                Package.country.ilike(contains_pattern(query.country), escape=LIKE_ESCAPE)
            )

        if query.min_price is not None:
            conditions.append(Package.price >= query.min_price)

        if query.max_price is not None:
            conditions.append(Package.price <= query.max_price)

        if query.min_duration is not None:
            conditions.append(Package.duration >= query.min_duration)

        if query.max_duration is not None:
            conditions.append(Package.duration <= query.max_duration)

        column = SORT_COLUMNS[query.sort_by]
        order = column.asc() if query.sort_order == "asc" else column.desc()
        stmt = select(Package).order_by(order, Package.id)

        packages, pagination = await paginate(self.db, stmt, conditions, query)

        logger.info(
            "Package search completed",
            extra={
                "total_found": pagination.total,
                "page": query.page,
                "search": query.search,
                "category": query.category.value if query.category else None
            }
        )

        return packages, pagination

    async def get_package_by_id(self, package_id: UUID) -> Optional[Package]:
        """
        Get package by ID.

        Args:
            package_id: Package ID to search for

        Returns:
            Package if found, None otherwise
        """
        stmt = select(Package).where(Package.id == package_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_package_by_slug(self, slug: str) -> Optional[Package]:
        stmt = select(Package).where(Package.slug == slug)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_package_by_id_or_raise(self, package_id: UUID) -> Package:
        """
        Get package by ID or raise NotFoundError.

        Raises:
            NotFoundError: If package not found
        """
        package = await self.get_package_by_id(package_id)
        if not package:
            logger.warning(
                "Package not found",
                extra={"package_id": str(package_id)}
            )
            raise NotFoundError(
                resource_type="package",
                resource_id=str(package_id)
            )
        return package

    async def get_package_by_slug_or_raise(self, slug: str) -> Package:
        package = await self.get_package_by_slug(slug)
        if not package:
            logger.warning("Package not found", extra={"slug": slug})
            raise NotFoundError(
                resource_type="package",
                detail=f"The requested package with slug '{slug}' could not be found"
            )
        return package

    async def get_package_with_lock(self, package_id: UUID) -> Package:
        """
        Get package by ID while holding a transaction-scoped lock on it.

        On PostgreSQL this takes an advisory lock keyed on the package ID so
        concurrent rating recomputations for the same package serialize.
        Other backends rely on their own write serialization.

        Raises:
            NotFoundError: If package not found
        """
        if self.db.get_bind().dialect.name == "postgresql":
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(hashtext(:package_id))"),
                {"package_id": str(package_id)}
            )

        return await self.get_package_by_id_or_raise(package_id)

    async def update_package(
        self,
        package_id: UUID,
        request: UpdatePackageRequest,
        caller: CurrentUser,
    ) -> Package:
        """
        Apply a partial update to a package.

        Raises:
            AuthorizationError: If caller is not an admin
            NotFoundError: If package not found
            ConflictError: If the new slug belongs to another package
        """
        require_admin(caller)
        package = await self.get_package_by_id_or_raise(package_id)

        changes = settable_changes(Package, request.model_dump(exclude_unset=True))

        if "slug" in changes and changes["slug"] != package.slug:
            await self._ensure_slug_available(changes["slug"], exclude_id=package.id)

        for field, value in changes.items():
            setattr(package, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(package)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Package update failed due to integrity constraint",
                extra={"package_id": str(package_id), "error": str(e)}
            )
            raise ConflictError(detail="Package update conflicts with an existing package")

        logger.info(
            "Package updated successfully",
            extra={
                "package_id": str(package.id),
                "fields": sorted(changes),
                "updated_by": str(caller.id)
            }
        )

        return package

    async def remove_package(self, package_id: UUID, caller: CurrentUser) -> Package:
        """
        Soft-delete a package by marking it inactive.

        Raises:
            AuthorizationError: If caller is not an admin
            NotFoundError: If package not found
        """
        require_admin(caller)
        package = await self.get_package_by_id_or_raise(package_id)

        package.is_active = False
        await self.db.commit()
        await self.db.refresh(package)

        logger.info(
            "Package deactivated",
            extra={"package_id": str(package.id), "deleted_by": str(caller.id)}
        )

        return package

    async def get_popular_packages(self, limit: int = POPULAR_LIMIT) -> List[Package]:
        """Active, available packages ordered by rating then review count."""
        stmt = (
            select(Package)
            .where(and_(Package.is_active.is_(True), Package.is_available.is_(True)))
            .order_by(Package.rating.desc(), Package.review_count.desc(), Package.id)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def get_categories(self) -> List[Category]:
        """Distinct categories of active packages."""
        stmt = (
            select(Package.category)
            .where(Package.is_active.is_(True))
            .distinct()
            .order_by(Package.category)
        )
        result = await self.db.execute(stmt)
        return [Category(value) for value in result.scalars()]

    async def _ensure_slug_available(self, slug: str, exclude_id: Optional[UUID] = None) -> None:
        stmt = select(Package).where(Package.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Package.id != exclude_id)

        existing = (await self.db.execute(stmt)).scalar_one_or_none()
        if existing:
            logger.warning(
                "Package slug already in use",
                extra={"slug": slug, "existing_package_id": str(existing.id)}
            )
            raise ConflictError(
                detail=f"Package with slug '{slug}' already exists",
                conflicting_resource={
                    "id": str(existing.id),
                    "slug": existing.slug,
                    "title": existing.title
                }
            )
