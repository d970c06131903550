"""Pydantic schemas for stage updates and the process history ledger."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StageRecordResponse(BaseModel):
    """One stage record of an order line."""

    stage: str = Field(..., description="Stage name copied from the catalog when the line was created")
    remarks: str = Field("", description="Free-text remarks")
    completed: bool = Field(False, description="Whether the stage is done")


class UpdateStageRequest(BaseModel):
    """Partial update of one stage. Omitted fields are left unchanged."""

    stage_index: int = Field(..., description="Zero-based position in the stage catalog")
    remarks: str | None = Field(None, description="New remarks, omitted to keep the current value")
    completed: bool | None = Field(None, description="New completed flag, omitted to keep the current value")


class UpdateStageResponse(BaseModel):
    """Full stage array of the line after the update."""

    po_item_id: int
    stage_index: int
    action: Literal["completed", "uncompleted", "remarks_added", "remarks_updated", "updated"]
    progress: int = Field(..., ge=0, le=100, description="Share of completed stages (0-100)")
    processes: list[StageRecordResponse] = Field(default_factory=list)


class HistoryEntryResponse(BaseModel):
    """Single ledger row, immutable."""

    id: int
    po_item_id: int
    stage_index: int
    stage_name: str
    action: str
    remarks: str | None
    previous_remarks: str | None
    completed: bool
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)
