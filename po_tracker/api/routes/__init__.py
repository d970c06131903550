from fastapi import APIRouter

from po_tracker.api.routes import (
    dashboard,
    health,
    items,
    process_history,
    purchase_order_items,
    purchase_orders,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(purchase_orders.router, prefix="/purchase-orders", tags=["purchase-orders"])
api_router.include_router(purchase_order_items.router, prefix="/purchase-order-items", tags=["purchase-order-items"])
api_router.include_router(process_history.router, prefix="/process-history", tags=["process-history"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
