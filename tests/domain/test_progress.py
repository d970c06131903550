"""Tests for line progress and dispatch detection."""
import pytest

from po_tracker.domain.progress import compute_line_progress, is_dispatched
from po_tracker.domain.stages import initialize_stages

pytestmark = pytest.mark.unit


def test_fresh_line_has_zero_progress():
    assert compute_line_progress(initialize_stages()) == 0


def test_progress_is_share_of_completed_stages():
    stages = initialize_stages()
    for record in stages[:3]:
        record.completed = True

    assert compute_line_progress(stages) == 30


def test_empty_array_has_zero_progress():
    assert compute_line_progress([]) == 0


def test_dispatched_only_checks_last_stage():
    stages = initialize_stages()
    stages[-1].completed = True

    assert is_dispatched(stages) is True


def test_all_but_last_complete_is_not_dispatched():
    stages = initialize_stages()
    for record in stages[:-1]:
        record.completed = True

    assert is_dispatched(stages) is False


def test_empty_array_is_not_dispatched():
    assert is_dispatched([]) is False
