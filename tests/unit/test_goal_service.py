"""
Unit tests for goal status rules.

Covered:
- is_goal_reached by direction
- apply_progress: the 80 -> 75 -> 69 weight-loss sequence, history records,
  no auto-transition for paused goals
- apply_status: completed_date stamped once
- parse_status / calculate_goal_progress
"""

import pytest
from datetime import date, datetime

from nutritrack.core.errors import ValidationFailure
from nutritrack.models.goal import Goal, GoalStatus
from nutritrack.services.goal_service import (
    apply_progress, apply_status, calculate_goal_progress, is_goal_reached, parse_status,
)

pytestmark = pytest.mark.unit


def make_goal(goal_type="Weight Loss", target=70.0, current=85.0, status=GoalStatus.active) -> Goal:
    return Goal(
        id=1,
        user_id=1,
        goal_type=goal_type,
        goal_title="Reach target",
        target_value=target,
        current_value=current,
        start_date=date(2024, 1, 1),
        target_date=date(2024, 6, 1),
        status=status,
        completed_date=None,
    )


# ---------------------------------------------------------------------------
# is_goal_reached
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("goal_type,current,target,expected", [
    ("Weight Loss", 69, 70, True),
    ("Weight Loss", 70, 70, True),
    ("Weight Loss", 71, 70, False),
    ("Muscle Gain", 75, 75, True),
    ("Strength", 99, 100, False),
    ("Endurance", 42.2, 42, True),
    ("Weight Gain", 60, 65, False),
    ("Hydration", 10, 5, False),
])
def test_is_goal_reached(goal_type, current, target, expected):
    assert is_goal_reached(goal_type, current, target) is expected


# ---------------------------------------------------------------------------
# apply_progress
# ---------------------------------------------------------------------------

def test_weight_loss_sequence_completes_exactly_once():
    goal = make_goal()

    statuses, stamps = [], []
    for value in (80, 75, 69):
        apply_progress(goal, value)
        statuses.append(goal.status)
        stamps.append(goal.completed_date)

    assert statuses == [GoalStatus.active, GoalStatus.active, GoalStatus.completed]
    assert stamps[0] is None and stamps[1] is None
    assert isinstance(stamps[2], datetime)


def test_progress_after_completion_keeps_original_completed_date():
    goal = make_goal()
    apply_progress(goal, 69)
    first = goal.completed_date

    apply_progress(goal, 68)

    assert goal.status == GoalStatus.completed
    assert goal.completed_date == first


def test_apply_progress_builds_history_record():
    goal = make_goal()
    record = apply_progress(goal, 78.5, notes="after holidays", recorded_on=date(2024, 2, 1))

    assert goal.current_value == 78.5
    assert record.goal_id == goal.id
    assert record.user_id == goal.user_id
    assert record.value == 78.5
    assert record.date_recorded == date(2024, 2, 1)
    assert record.notes == "after holidays"
    assert record.data_source == "Manual"


def test_paused_goal_does_not_auto_complete():
    goal = make_goal(status=GoalStatus.paused)
    apply_progress(goal, 60)
    assert goal.status == GoalStatus.paused
    assert goal.completed_date is None


# ---------------------------------------------------------------------------
# apply_status / parse_status
# ---------------------------------------------------------------------------

def test_explicit_completion_stamps_date_once():
    goal = make_goal()
    apply_status(goal, GoalStatus.completed)
    first = goal.completed_date
    assert first is not None

    apply_status(goal, GoalStatus.active)
    apply_status(goal, GoalStatus.completed)

    assert goal.status == GoalStatus.completed
    assert goal.completed_date == first


def test_status_change_to_paused_leaves_completed_date_unset():
    goal = make_goal()
    apply_status(goal, GoalStatus.paused)
    assert goal.status == GoalStatus.paused
    assert goal.completed_date is None


def test_parse_status_accepts_known_values():
    assert parse_status("Cancelled") is GoalStatus.cancelled


def test_parse_status_rejects_unknown_value():
    with pytest.raises(ValidationFailure) as exc_info:
        parse_status("Abandoned")
    assert "Active" in exc_info.value.message


# ---------------------------------------------------------------------------
# calculate_goal_progress
# ---------------------------------------------------------------------------

def test_progress_for_increasing_goal():
    assert calculate_goal_progress("Strength", 50, 200) == 25.0


def test_progress_is_capped_at_100():
    assert calculate_goal_progress("Endurance", 50, 20) == 100.0


def test_progress_for_weight_loss_is_inverted():
    assert calculate_goal_progress("Weight Loss", 85, 70) == 0.0
    assert calculate_goal_progress("Weight Loss", 63, 70) == 10.0


def test_progress_with_zero_target_is_zero():
    assert calculate_goal_progress("Strength", 10, 0) == 0.0
