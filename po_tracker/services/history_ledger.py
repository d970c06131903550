"""HistoryLedger — append-only audit log of stage transitions.

Every successful stage update writes exactly one row. Rows are never updated
or deleted; a correction is simply another row.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from po_tracker.db.models.process_history import ProcessHistory
from po_tracker.domain.stages import HistoryAction


class HistoryLedger:
    """Reads and appends process history within a caller-owned session.

    The ledger does not check that the order line exists; it is always invoked
    right after the tracker has loaded the line in the same session.
    """

    def __init__(self, session: AsyncSession):
        """Initialize with dependency-injected session.

        Args:
            session: SQLAlchemy async session (commit is the caller's job)
        """
        self.session = session

    async def record(
        self,
        po_item_id: int,
        stage_index: int,
        stage_name: str,
        action: HistoryAction | str,
        remarks: str | None,
        previous_remarks: str | None,
        completed: bool,
    ) -> ProcessHistory:
        """Append one history entry.

        The id and changed_at timestamp are assigned on flush.

        Returns:
            The flushed ProcessHistory row
        """
        entry = ProcessHistory(
            po_item_id=po_item_id,
            stage_index=stage_index,
            stage_name=stage_name,
            action=HistoryAction(action).value,
            remarks=remarks,
            previous_remarks=previous_remarks,
            completed=completed,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def history_for(self, po_item_id: int) -> list[ProcessHistory]:
        """History of one order line, newest first."""
        result = await self.session.execute(
            select(ProcessHistory)
            .where(ProcessHistory.po_item_id == po_item_id)
            .order_by(ProcessHistory.changed_at.desc(), ProcessHistory.id.desc())
        )
        return list(result.scalars().all())

    async def all_history(self) -> list[ProcessHistory]:
        """History of every line, newest first, for bulk joins in detail views."""
        result = await self.session.execute(
            select(ProcessHistory).order_by(ProcessHistory.changed_at.desc(), ProcessHistory.id.desc())
        )
        return list(result.scalars().all())
