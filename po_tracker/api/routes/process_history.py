"""Process history API.

GET /api/process-history - Every ledger row across all lines, newest first
"""

from fastapi import APIRouter

from po_tracker.db.base import get_session_factory
from po_tracker.schemas.process import HistoryEntryResponse
from po_tracker.services.history_ledger import HistoryLedger

router = APIRouter()


@router.get("", response_model=list[HistoryEntryResponse])
async def list_process_history():
    async with get_session_factory()() as session:
        return await HistoryLedger(session).all_history()
