"""Pydantic schemas for dashboard API responses.

The dashboard summarizes pending work and dispatched weight across all orders.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class MonthlyWeightResponse(BaseModel):
    """Dispatched weight for one calendar month."""

    month: str = Field(..., description="Month bucket as YYYY-MM")
    weight: float = Field(..., description="Dispatched weight in kg, rounded to 2 decimals")


class DashboardStatsResponse(BaseModel):
    """Dashboard metrics payload.

    monthly_dispatched_weight defaults to an empty array (never null).
    """

    oldest_pending_date: datetime | None = Field(None, description="Order date of the oldest PO with a pending line")
    pending_items_count: int = Field(0, ge=0, description="Lines whose final stage is not completed")
    monthly_dispatched_weight: list[MonthlyWeightResponse] = Field(
        default_factory=list, description="Ascending by month"
    )
