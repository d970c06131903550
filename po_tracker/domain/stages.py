"""Process stage catalog, stage records and the single-stage transition rule.

Pure domain logic with no external dependencies.
"""
import json
from dataclasses import asdict, dataclass
from enum import Enum

from po_tracker.core.exceptions import StageIndexError

# Names repeat ("Internal Quality"); records are addressed by position only.
PROCESS_STAGES: tuple[str, ...] = (
    "Feasibility",
    "Designing",
    "Cutting",
    "Internal Quality",
    "Processing",
    "Fabrication",
    "Finishing",
    "Internal Quality",
    "Customer Quality",
    "Ready For Dispatch",
)

STAGE_COUNT = len(PROCESS_STAGES)


class HistoryAction(str, Enum):
    """Label written to the history ledger for each stage update."""

    COMPLETED = "completed"
    UNCOMPLETED = "uncompleted"
    REMARKS_ADDED = "remarks_added"
    REMARKS_UPDATED = "remarks_updated"
    UPDATED = "updated"


@dataclass
class StageRecord:
    """One position in an order line's stage array."""

    stage: str
    remarks: str = ""
    completed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StageUpdate:
    """Outcome of applying one update to a stage array."""

    stages: list[StageRecord]
    stage_index: int
    action: HistoryAction
    previous_remarks: str | None
    previous_completed: bool

    @property
    def record(self) -> StageRecord:
        return self.stages[self.stage_index]


def initialize_stages() -> list[StageRecord]:
    """Return a fresh stage array: one untouched record per catalog entry."""
    return [StageRecord(stage=name) for name in PROCESS_STAGES]


def load_stages(blob: str | None) -> tuple[list[StageRecord], bool]:
    """Decode a stored stage blob.

    Returns:
        (stages, recovered) where recovered is True when the blob was absent or
        unusable and a freshly initialized array was substituted.

    Never raises: a corrupt or legacy blob means "never started".
    """
    if not blob:
        return initialize_stages(), True

    try:
        raw = json.loads(blob)
    except (TypeError, ValueError):
        return initialize_stages(), True

    if not isinstance(raw, list) or len(raw) != STAGE_COUNT:
        return initialize_stages(), True

    stages = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("stage"), str):
            return initialize_stages(), True
        remarks = entry.get("remarks") or ""
        completed = entry.get("completed")
        if completed is None:
            completed = False
        if not isinstance(remarks, str) or not isinstance(completed, bool):
            return initialize_stages(), True
        stages.append(
            StageRecord(
                stage=entry["stage"],
                remarks=remarks,
                completed=completed,
            )
        )
    return stages, False


def parse_stages(blob: str | None) -> list[StageRecord]:
    """Decode a stored stage blob, falling back to a fresh array."""
    stages, _ = load_stages(blob)
    return stages


def serialize_stages(stages: list[StageRecord]) -> str:
    """Encode a stage array as the stored JSON list of {stage, remarks, completed}."""
    return json.dumps([record.to_dict() for record in stages])


def classify_action(
    previous_remarks: str | None,
    previous_completed: bool,
    remarks: str | None = None,
    completed: bool | None = None,
) -> HistoryAction:
    """Classify an update for the history ledger.

    Rules:
        - A change of the completed flag wins over a simultaneous remarks change
        - A remarks change is "added" when there were no remarks before, else "updated"
        - Anything else (nothing supplied, or same values) is the generic "updated"
    """
    if completed is not None and completed != previous_completed:
        return HistoryAction.COMPLETED if completed else HistoryAction.UNCOMPLETED

    if remarks is not None and remarks != (previous_remarks or ""):
        return HistoryAction.REMARKS_UPDATED if previous_remarks else HistoryAction.REMARKS_ADDED

    return HistoryAction.UPDATED


def apply_stage_update(
    stages: list[StageRecord],
    stage_index: int,
    remarks: str | None = None,
    completed: bool | None = None,
) -> StageUpdate:
    """Apply the supplied fields to one stage record.

    Fields left as None are not touched. No ordering between stages is
    enforced: any stage may be completed regardless of its predecessors.

    Raises:
        StageIndexError: stage_index is outside [0, len(stages))
    """
    if stage_index < 0 or stage_index >= len(stages):
        raise StageIndexError(stage_index, len(stages))

    target = stages[stage_index]
    previous_remarks = target.remarks or None
    previous_completed = target.completed

    action = classify_action(previous_remarks, previous_completed, remarks, completed)

    if remarks is not None:
        target.remarks = remarks
    if completed is not None:
        target.completed = completed

    return StageUpdate(
        stages=stages,
        stage_index=stage_index,
        action=action,
        previous_remarks=previous_remarks,
        previous_completed=previous_completed,
    )
