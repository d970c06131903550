"""Integration tests for ProcessTracker against a SQLite test database.

Covers the stage update rule end to end: persistence of the stage blob,
history classification, bounds checking and malformed-blob recovery.
"""

from datetime import datetime

import pytest
from sqlalchemy import func, select

from po_tracker.core.exceptions import InvalidArgumentError, NotFoundError
from po_tracker.db.models.process_history import ProcessHistory
from po_tracker.db.models.purchase_order import PurchaseOrderItem
from po_tracker.domain.stages import STAGE_COUNT, HistoryAction, initialize_stages, parse_stages
from po_tracker.services.history_ledger import HistoryLedger
from po_tracker.services.process_tracker import ProcessTracker

pytestmark = pytest.mark.integration


@pytest.fixture
def tracker(session_factory) -> ProcessTracker:
    return ProcessTracker(session_factory)


@pytest.fixture
async def line_id(make_item, make_order) -> int:
    item = await make_item()
    order = await make_order(datetime(2024, 1, 1), [{"item_id": item.id, "quantity": 2}])
    return order.items[0].id


async def _stored_stages(session_factory, po_item_id: int):
    async with session_factory() as session:
        line = await session.get(PurchaseOrderItem, po_item_id)
        return parse_stages(line.processes)


async def _history(session_factory, po_item_id: int) -> list[ProcessHistory]:
    async with session_factory() as session:
        return await HistoryLedger(session).history_for(po_item_id)


async def _history_count(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(ProcessHistory))
        return result.scalar_one()


async def test_new_line_starts_with_fresh_stages(session_factory, line_id):
    stages = await _stored_stages(session_factory, line_id)

    assert len(stages) == STAGE_COUNT
    assert stages == initialize_stages()


async def test_complete_stage_persists_and_logs(tracker, session_factory, line_id):
    update = await tracker.update_stage(line_id, 2, completed=True)

    assert update.action == HistoryAction.COMPLETED
    assert update.stages[2].completed is True

    stored = await _stored_stages(session_factory, line_id)
    assert stored[2].completed is True

    history = await _history(session_factory, line_id)
    assert len(history) == 1
    entry = history[0]
    assert entry.action == "completed"
    assert entry.stage_index == 2
    assert entry.stage_name == "Cutting"
    assert entry.completed is True
    assert entry.changed_at is not None


async def test_no_op_update_keeps_stage_but_logs_updated(tracker, session_factory, line_id):
    update = await tracker.update_stage(line_id, 0)

    assert update.action == HistoryAction.UPDATED
    assert await _stored_stages(session_factory, line_id) == initialize_stages()

    history = await _history(session_factory, line_id)
    assert [h.action for h in history] == ["updated"]
    assert history[0].completed is False
    assert history[0].remarks is None


async def test_completion_round_trip(tracker, session_factory, line_id):
    await tracker.update_stage(line_id, 5, completed=True)
    await tracker.update_stage(line_id, 5, completed=False)

    stored = await _stored_stages(session_factory, line_id)
    assert stored[5].completed is False

    history = await _history(session_factory, line_id)
    # newest first
    assert [h.action for h in history] == ["uncompleted", "completed"]
    assert [h.completed for h in history] == [False, True]


async def test_remarks_added_then_updated(tracker, session_factory, line_id):
    await tracker.update_stage(line_id, 1, remarks="A")
    await tracker.update_stage(line_id, 1, remarks="B")

    history = await _history(session_factory, line_id)
    latest, first = history

    assert first.action == "remarks_added"
    assert first.remarks == "A"
    assert first.previous_remarks is None
    assert latest.action == "remarks_updated"
    assert latest.remarks == "B"
    assert latest.previous_remarks == "A"

    stored = await _stored_stages(session_factory, line_id)
    assert stored[1].remarks == "B"


async def test_completion_takes_priority_over_remarks(tracker, session_factory, line_id):
    update = await tracker.update_stage(line_id, 3, remarks="QC passed", completed=True)

    assert update.action == HistoryAction.COMPLETED
    assert update.stages[3].remarks == "QC passed"

    history = await _history(session_factory, line_id)
    assert history[0].stage_name == "Internal Quality"
    assert history[0].remarks == "QC passed"


async def test_remarks_only_update_keeps_completed_flag(tracker, session_factory, line_id):
    await tracker.update_stage(line_id, 4, completed=True)
    await tracker.update_stage(line_id, 4, remarks="Done early")

    stored = await _stored_stages(session_factory, line_id)
    assert stored[4].completed is True

    history = await _history(session_factory, line_id)
    assert history[0].action == "remarks_added"
    assert history[0].completed is True


@pytest.mark.parametrize("stage_index", [-1, STAGE_COUNT])
async def test_out_of_range_index_writes_nothing(tracker, session_factory, line_id, stage_index):
    with pytest.raises(InvalidArgumentError, match="Invalid stage index"):
        await tracker.update_stage(line_id, stage_index, completed=True)

    assert await _history_count(session_factory) == 0
    assert await _stored_stages(session_factory, line_id) == initialize_stages()


async def test_unknown_line_not_found(tracker, session_factory, engine):
    with pytest.raises(NotFoundError):
        await tracker.update_stage(9999, 0, completed=True)

    assert await _history_count(session_factory) == 0


@pytest.mark.parametrize("blob", ["not json", None])
async def test_malformed_blob_behaves_like_fresh_line(tracker, session_factory, make_item, make_order, blob):
    item = await make_item()
    order = await make_order(datetime(2024, 1, 1), [{"item_id": item.id, "processes": blob}])
    po_item_id = order.items[0].id

    assert await tracker.get_stages(po_item_id) == initialize_stages()

    update = await tracker.update_stage(po_item_id, 0, completed=True)

    expected = initialize_stages()
    expected[0].completed = True
    assert update.stages == expected
    assert await _stored_stages(session_factory, po_item_id) == expected


async def test_get_stages_unknown_line(tracker, engine):
    with pytest.raises(NotFoundError):
        await tracker.get_stages(12345)
