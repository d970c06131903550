"""Purchase order API routes."""

from fastapi import APIRouter

from po_tracker.db.base import get_session_factory
from po_tracker.schemas.purchase_orders import (
    CreatePurchaseOrderRequest,
    LineCreateRequest,
    LineResponse,
    PurchaseOrderHeader,
    PurchaseOrderResponse,
)
from po_tracker.services.purchase_order_service import PurchaseOrderService

router = APIRouter()


@router.get("", response_model=list[PurchaseOrderResponse])
async def list_purchase_orders():
    """All purchase orders with their lines, items and parsed stages."""
    service = PurchaseOrderService(get_session_factory())
    return await service.list_purchase_orders()


@router.post("", response_model=PurchaseOrderResponse, status_code=201)
async def create_purchase_order(request: CreatePurchaseOrderRequest):
    """Create a purchase order and its lines.

    Raises:
        NotFoundError(404): A line references an unknown item
    """
    service = PurchaseOrderService(get_session_factory())
    return await service.create_purchase_order(request)


@router.get("/{po_id}", response_model=PurchaseOrderResponse)
async def get_purchase_order(po_id: int):
    service = PurchaseOrderService(get_session_factory())
    return await service.get_purchase_order(po_id)


@router.patch("/{po_id}", response_model=PurchaseOrderResponse)
async def update_purchase_order(po_id: int, request: PurchaseOrderHeader):
    service = PurchaseOrderService(get_session_factory())
    return await service.update_purchase_order(po_id, request)


@router.post("/{po_id}/items", response_model=LineResponse, status_code=201)
async def add_line(po_id: int, request: LineCreateRequest):
    """Add a line to an existing order; its stages start fresh."""
    service = PurchaseOrderService(get_session_factory())
    return await service.add_line(po_id, request)
