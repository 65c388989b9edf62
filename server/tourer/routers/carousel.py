"""Carousel router for promotional entries."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import RequiredAuth
from ..core.security import CurrentUser
from ..schemas.carousel import CarouselItem, CreateCarouselItemRequest, UpdateCarouselItemRequest
from ..services.carousel_service import CarouselService

router = APIRouter(prefix="/carousel", tags=["carousel"])

DB_DEPENDENCY = Depends(get_db)


@router.get("", response_model=List[CarouselItem])
async def list_active_items(db: AsyncSession = DB_DEPENDENCY) -> List[CarouselItem]:
    """Active items in display order."""
    items = await CarouselService(db).list_active_items()
    return [CarouselItem.model_validate(item) for item in items]


@router.get("/admin", response_model=List[CarouselItem])
async def list_all_items(
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> List[CarouselItem]:
    """Every item, including inactive ones (admin only)."""
    items = await CarouselService(db).list_all_items(caller)
    return [CarouselItem.model_validate(item) for item in items]


@router.get("/{item_id}", response_model=CarouselItem)
async def get_item(item_id: UUID, db: AsyncSession = DB_DEPENDENCY) -> CarouselItem:
    item = await CarouselService(db).get_item_by_id_or_raise(item_id)
    return CarouselItem.model_validate(item)


@router.post("", response_model=CarouselItem, status_code=status.HTTP_201_CREATED)
async def create_item(
    request: CreateCarouselItemRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> CarouselItem:
    item = await CarouselService(db).create_item(request, caller)
    return CarouselItem.model_validate(item)


@router.patch("/{item_id}", response_model=CarouselItem)
async def update_item(
    item_id: UUID,
    request: UpdateCarouselItemRequest,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> CarouselItem:
    item = await CarouselService(db).update_item(item_id, request, caller)
    return CarouselItem.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: UUID,
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> None:
    await CarouselService(db).delete_item(item_id, caller)
