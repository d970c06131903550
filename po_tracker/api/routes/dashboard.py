"""Dashboard API endpoint.

GET /api/dashboard/stats - Pending and dispatched-weight metrics across all orders
"""

from fastapi import APIRouter

from po_tracker.db.base import get_session_factory
from po_tracker.schemas.dashboard import DashboardStatsResponse
from po_tracker.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats() -> DashboardStatsResponse:
    """Get dashboard metrics.

    Returns:
    - Oldest order date among orders with a pending line (null when none)
    - Count of lines whose final stage is not completed
    - Dispatched weight per month, ascending
    """
    session_factory = get_session_factory()

    async with session_factory() as session:
        service = DashboardService()
        return await service.get_stats(session)
