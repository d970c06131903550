"""Pydantic schemas for catalog items."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

VendorName = Literal[
    "RUBBER METSO",
    "SCREEN DEVELOPEMENT METSO",
    "SCREEN REGULAR METSO",
    "SOURCING METSO",
    "LT METSO",
    "AGGREGATE METSO",
    "OTHER",
]


class ItemRequest(BaseModel):
    """Create or replace a catalog item."""

    material_number: str = Field(..., min_length=1, description="Unique material number")
    vendor_name: VendorName
    drawing_number: str = Field(..., min_length=1)
    revision_number: str = "1.0"
    item_name: str = Field(..., min_length=1)
    description: str = ""
    special_remarks: str | None = None
    price: int = Field(0, ge=0)
    weight: float | None = Field(None, ge=0, description="Unit weight in kg")


class ItemResponse(BaseModel):
    id: int
    material_number: str
    vendor_name: str
    drawing_number: str
    revision_number: str
    item_name: str
    description: str
    special_remarks: str | None
    price: int
    weight: float | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
