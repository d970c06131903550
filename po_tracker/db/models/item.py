"""Item model — catalog materials that purchase-order lines reference."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from po_tracker.db.base import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    material_number = Column(String(64), nullable=False, unique=True, index=True)
    vendor_name = Column(String(100), nullable=False)
    drawing_number = Column(String(100), nullable=False)
    revision_number = Column(String(20), nullable=False, default="1.0")
    item_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    special_remarks = Column(Text, nullable=True)
    price = Column(Integer, nullable=False, default=0)
    weight = Column(Float, nullable=True)  # kg per unit; null counts as 0 on the dashboard

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
