"""Re-export all models so Base.metadata sees them."""

from po_tracker.db.models.item import Item
from po_tracker.db.models.process_history import ProcessHistory
from po_tracker.db.models.purchase_order import PurchaseOrder, PurchaseOrderItem

__all__ = [
    "Item",
    "ProcessHistory",
    "PurchaseOrder",
    "PurchaseOrderItem",
]
