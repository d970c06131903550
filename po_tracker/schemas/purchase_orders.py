"""Pydantic schemas for purchase orders and their lines."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from po_tracker.schemas.items import ItemResponse, VendorName
from po_tracker.schemas.process import StageRecordResponse


class LineCreateRequest(BaseModel):
    """A line to add to a purchase order. Stages always start fresh."""

    item_id: int
    quantity: int = Field(..., ge=1)
    price_override: int | None = Field(None, ge=0)


class LineUpdateRequest(BaseModel):
    """Quantity/price change on an existing line. Stage data cannot be edited here."""

    quantity: int | None = Field(None, ge=1)
    price_override: int | None = Field(None, ge=0)


class PurchaseOrderHeader(BaseModel):
    po_number: str = Field(..., min_length=1)
    vendor_name: VendorName
    order_date: datetime
    delivery_date: datetime | None = None
    remarks: str | None = None

    @field_validator("order_date", "delivery_date")
    @classmethod
    def normalize_to_utc(cls, v: datetime | None) -> datetime | None:
        """Store offset-aware dates as UTC so month buckets agree across stores."""
        if v is None or v.tzinfo is None:
            return v
        return v.astimezone(timezone.utc)


class CreatePurchaseOrderRequest(PurchaseOrderHeader):
    items: list[LineCreateRequest] = Field(default_factory=list)


class LineResponse(BaseModel):
    id: int
    po_id: int
    item_id: int
    quantity: int
    price_override: int | None
    item: ItemResponse | None
    processes: list[StageRecordResponse] = Field(default_factory=list)
    progress: int = Field(0, ge=0, le=100)
    dispatched: bool = False


class PurchaseOrderResponse(BaseModel):
    id: int
    po_number: str
    vendor_name: str
    order_date: datetime
    delivery_date: datetime | None
    remarks: str | None
    created_at: datetime
    items: list[LineResponse] = Field(default_factory=list)
