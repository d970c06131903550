"""Order line API routes: line edits, stage updates and per-line history.

PATCH  /api/purchase-order-items/{id}          - quantity / price override
DELETE /api/purchase-order-items/{id}          - remove the line
PATCH  /api/purchase-order-items/{id}/process  - update one stage
GET    /api/purchase-order-items/{id}/history  - ledger rows for the line, newest first
"""

from fastapi import APIRouter

from po_tracker.db.base import get_session_factory
from po_tracker.domain.progress import compute_line_progress
from po_tracker.schemas.process import (
    HistoryEntryResponse,
    StageRecordResponse,
    UpdateStageRequest,
    UpdateStageResponse,
)
from po_tracker.schemas.purchase_orders import LineResponse, LineUpdateRequest
from po_tracker.services.history_ledger import HistoryLedger
from po_tracker.services.process_tracker import ProcessTracker
from po_tracker.services.purchase_order_service import PurchaseOrderService

router = APIRouter()


@router.patch("/{po_item_id}", response_model=LineResponse)
async def update_line(po_item_id: int, request: LineUpdateRequest):
    service = PurchaseOrderService(get_session_factory())
    return await service.update_line(po_item_id, request)


@router.delete("/{po_item_id}")
async def delete_line(po_item_id: int):
    service = PurchaseOrderService(get_session_factory())
    await service.delete_line(po_item_id)
    return {"deleted": True, "id": po_item_id}


@router.patch("/{po_item_id}/process", response_model=UpdateStageResponse)
async def update_stage(po_item_id: int, request: UpdateStageRequest) -> UpdateStageResponse:
    """Update one stage of a line.

    Raises:
        NotFoundError(404): Line not found
        InvalidArgumentError(400): Stage index out of range
    """
    tracker = ProcessTracker(get_session_factory())
    update = await tracker.update_stage(
        po_item_id,
        request.stage_index,
        remarks=request.remarks,
        completed=request.completed,
    )
    return UpdateStageResponse(
        po_item_id=po_item_id,
        stage_index=update.stage_index,
        action=update.action.value,
        progress=compute_line_progress(update.stages),
        processes=[StageRecordResponse(**record.to_dict()) for record in update.stages],
    )


@router.get("/{po_item_id}/history", response_model=list[HistoryEntryResponse])
async def get_history(po_item_id: int):
    """History entries for one line, newest first. Unknown lines yield an empty list."""
    async with get_session_factory()() as session:
        return await HistoryLedger(session).history_for(po_item_id)
