"""ProcessTracker — applies stage updates to order lines and logs them.

This is where the pure stage rules in po_tracker.domain.stages meet the
database. One call = one line read-modify-write + one history row, committed
together.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from po_tracker.core.exceptions import NotFoundError
from po_tracker.db.models.purchase_order import PurchaseOrderItem
from po_tracker.domain.stages import (
    StageRecord,
    StageUpdate,
    apply_stage_update,
    load_stages,
    serialize_stages,
)
from po_tracker.services.history_ledger import HistoryLedger

logger = structlog.get_logger(__name__)


class ProcessTracker:
    """Service layer for per-line stage progress."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with an injected session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def update_stage(
        self,
        po_item_id: int,
        stage_index: int,
        remarks: str | None = None,
        completed: bool | None = None,
    ) -> StageUpdate:
        """Update one stage of an order line and append a history entry.

        Args:
            po_item_id: Order line id
            stage_index: Zero-based stage position
            remarks: New remarks, None to leave unchanged
            completed: New completed flag, None to leave unchanged

        Returns:
            StageUpdate holding the full updated stage array and the action logged

        Raises:
            NotFoundError: order line does not exist
            StageIndexError: stage_index outside the catalog (nothing is written)
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(PurchaseOrderItem).where(PurchaseOrderItem.id == po_item_id).with_for_update()
            )
            line = result.scalar_one_or_none()
            if line is None:
                raise NotFoundError("Purchase order item not found")

            stages, recovered = load_stages(line.processes)
            if recovered and line.processes:
                logger.warning("stage_blob_malformed", po_item_id=po_item_id)

            update = apply_stage_update(stages, stage_index, remarks=remarks, completed=completed)
            line.processes = serialize_stages(update.stages)

            ledger = HistoryLedger(session)
            await ledger.record(
                po_item_id=po_item_id,
                stage_index=stage_index,
                stage_name=update.record.stage,
                action=update.action,
                remarks=remarks or None,
                previous_remarks=update.previous_remarks,
                completed=update.record.completed,
            )

            await session.commit()

        logger.info(
            "stage_updated",
            po_item_id=po_item_id,
            stage_index=stage_index,
            stage=update.record.stage,
            action=update.action.value,
            completed=update.record.completed,
        )
        return update

    async def get_stages(self, po_item_id: int) -> list[StageRecord]:
        """Current stage array of a line (fresh array for absent/corrupt data).

        Raises:
            NotFoundError: order line does not exist
        """
        async with self.session_factory() as session:
            result = await session.execute(select(PurchaseOrderItem).where(PurchaseOrderItem.id == po_item_id))
            line = result.scalar_one_or_none()
            if line is None:
                raise NotFoundError("Purchase order item not found")

            stages, recovered = load_stages(line.processes)
            if recovered and line.processes:
                logger.warning("stage_blob_malformed", po_item_id=po_item_id)
            return stages
