"""Carousel service for promotional home-screen entries."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..core.security import CurrentUser, require_admin
from ..models.carousel import CarouselItem
from ..schemas.carousel import CreateCarouselItemRequest, UpdateCarouselItemRequest
from .updates import settable_changes

logger = logging.getLogger(__name__)


class CarouselService:
    """Service for carousel-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active_items(self) -> List[CarouselItem]:
        """Active items in display order."""
        stmt = (
            select(CarouselItem)
            .where(CarouselItem.is_active.is_(True))
            .order_by(CarouselItem.sort_order.asc(), CarouselItem.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def list_all_items(self, caller: CurrentUser) -> List[CarouselItem]:
        """Every item, including inactive ones, in display order."""
        require_admin(caller)
        stmt = select(CarouselItem).order_by(
            CarouselItem.sort_order.asc(), CarouselItem.created_at.desc()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def get_item_by_id(self, item_id: UUID) -> Optional[CarouselItem]:
        stmt = select(CarouselItem).where(CarouselItem.id == item_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_item_by_id_or_raise(self, item_id: UUID) -> CarouselItem:
        """
        Get carousel item by ID or raise NotFoundError.

        Raises:
            NotFoundError: If item not found
        """
        item = await self.get_item_by_id(item_id)
        if not item:
            logger.warning(
                "Carousel item not found",
                extra={"carousel_item_id": str(item_id)}
            )
            raise NotFoundError(
                resource_type="carousel item",
                resource_id=str(item_id)
            )
        return item

    async def create_item(self, request: CreateCarouselItemRequest, caller: CurrentUser) -> CarouselItem:
        require_admin(caller)

        item = CarouselItem(**request.model_dump())
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(
            "Carousel item created",
            extra={
                "carousel_item_id": str(item.id),
                "sort_order": item.sort_order,
                "created_by": str(caller.id)
            }
        )

        return item

    async def update_item(
        self,
        item_id: UUID,
        request: UpdateCarouselItemRequest,
        caller: CurrentUser,
    ) -> CarouselItem:
        require_admin(caller)
        item = await self.get_item_by_id_or_raise(item_id)

        changes = settable_changes(CarouselItem, request.model_dump(exclude_unset=True))
        for field, value in changes.items():
            setattr(item, field, value)

        await self.db.commit()
        await self.db.refresh(item)

        logger.info(
            "Carousel item updated",
            extra={"carousel_item_id": str(item.id), "fields": sorted(changes)}
        )

        return item

    async def delete_item(self, item_id: UUID, caller: CurrentUser) -> None:
        require_admin(caller)
        item = await self.get_item_by_id_or_raise(item_id)

        await self.db.delete(item)
        await self.db.commit()

        logger.info(
            "Carousel item deleted",
            extra={"carousel_item_id": str(item_id), "deleted_by": str(caller.id)}
        )
