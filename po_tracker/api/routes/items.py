"""Catalog item API routes."""

from fastapi import APIRouter

from po_tracker.db.base import get_session_factory
from po_tracker.schemas.items import ItemRequest, ItemResponse
from po_tracker.services.item_service import ItemService

router = APIRouter()


@router.get("", response_model=list[ItemResponse])
async def list_items():
    service = ItemService(get_session_factory())
    return await service.list_items()


@router.post("", response_model=ItemResponse, status_code=201)
async def create_item(request: ItemRequest):
    """Register a catalog item.

    Raises:
        ConflictError(409): Material number already exists
    """
    service = ItemService(get_session_factory())
    return await service.create_item(request)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(item_id: int):
    service = ItemService(get_session_factory())
    return await service.get_item(item_id)


@router.patch("/{item_id}", response_model=ItemResponse)
async def update_item(item_id: int, request: ItemRequest):
    """Replace a catalog item.

    Raises:
        NotFoundError(404): Item not found
        ConflictError(409): New material number already exists
    """
    service = ItemService(get_session_factory())
    return await service.update_item(item_id, request)
