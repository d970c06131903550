"""DashboardService: loads all orders and hands them to the aggregation domain.

Metrics are recomputed on every request; there is no cache to invalidate.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from po_tracker.db.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from po_tracker.domain.dashboard import compute_dashboard_stats
from po_tracker.schemas.dashboard import DashboardStatsResponse, MonthlyWeightResponse

logger = structlog.get_logger(__name__)


class DashboardService:
    """Service layer for dashboard aggregation.

    All methods are pure orchestration - the counting rules live in
    po_tracker.domain.dashboard.
    """

    async def get_stats(self, session: AsyncSession) -> DashboardStatsResponse:
        """Compute dashboard metrics across every purchase order.

        Args:
            session: SQLAlchemy async session

        Returns:
            DashboardStatsResponse with oldest pending order date, pending line
            count and monthly dispatched weight
        """
        # Lines and their catalog items in two extra queries, not one per order
        result = await session.execute(
            select(PurchaseOrder).options(
                selectinload(PurchaseOrder.items).selectinload(PurchaseOrderItem.item)
            )
        )
        orders = result.scalars().all()

        stats = compute_dashboard_stats(orders)

        logger.debug(
            "dashboard_stats_computed",
            orders=len(orders),
            pending_items=stats.pending_items_count,
            months=len(stats.monthly_dispatched_weight),
        )

        return DashboardStatsResponse(
            oldest_pending_date=stats.oldest_pending_date,
            pending_items_count=stats.pending_items_count,
            monthly_dispatched_weight=[
                MonthlyWeightResponse(month=bucket.month, weight=bucket.weight)
                for bucket in stats.monthly_dispatched_weight
            ],
        )
