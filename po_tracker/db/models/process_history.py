"""ProcessHistory model — append-only log of stage transitions."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from po_tracker.db.base import Base


class ProcessHistory(Base):
    __tablename__ = "process_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Plain column, not a FK: audit rows outlive deleted order lines
    po_item_id = Column(Integer, nullable=False, index=True)

    stage_index = Column(Integer, nullable=False)
    stage_name = Column(String(100), nullable=False)  # snapshot at write time
    action = Column(String(32), nullable=False)  # completed, uncompleted, remarks_added, remarks_updated, updated
    remarks = Column(Text, nullable=True)
    previous_remarks = Column(Text, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)  # flag after the transition

    changed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    # NO updated_at -- entries are immutable (append-only)
