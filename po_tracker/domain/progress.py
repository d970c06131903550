"""Deterministic progress computation functions.

Pure functions with no external dependencies.
"""

from po_tracker.domain.stages import StageRecord


def compute_line_progress(stages: list[StageRecord]) -> int:
    """Compute line progress (0-100) as the share of completed stage records.

    Args:
        stages: The line's stage array

    Returns:
        Integer percentage 0-100, rounded to nearest
    """
    if not stages:
        return 0

    completed = sum(1 for record in stages if record.completed)
    return round(completed / len(stages) * 100)


def is_dispatched(stages: list[StageRecord]) -> bool:
    """A line counts as dispatched once its last stage is completed.

    Earlier stages are not checked.
    """
    return bool(stages) and stages[-1].completed
