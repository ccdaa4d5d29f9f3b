from datetime import date, datetime
from typing import Optional

from nutritrack.core.errors import ValidationFailure
from nutritrack.models.goal import Goal, GoalStatus, ProgressTracking

ACTIVE_GOAL_LIMIT = 10

DECREASING_GOAL_TYPES = frozenset({"Weight Loss"})
INCREASING_GOAL_TYPES = frozenset({"Weight Gain", "Muscle Gain", "Strength", "Endurance"})


def is_goal_reached(goal_type: str, current_value: float, target_value: float) -> bool:
    """Goal types outside the two known directions never complete on their own."""
    if goal_type in DECREASING_GOAL_TYPES:
        return current_value <= target_value
    if goal_type in INCREASING_GOAL_TYPES:
        return current_value >= target_value
    return False


def parse_status(value: str) -> GoalStatus:
    try:
        return GoalStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in GoalStatus)
        raise ValidationFailure(f"Invalid status. Must be one of: {allowed}")


def _mark_completed(goal: Goal) -> None:
    goal.status = GoalStatus.completed
    if goal.completed_date is None:
        goal.completed_date = datetime.utcnow()


def apply_progress(
    goal: Goal,
    value: float,
    notes: Optional[str] = None,
    recorded_on: Optional[date] = None,
) -> ProgressTracking:
    """Set the goal's current value and build the history record for it.

    Only an Active goal moves to Completed here; paused or cancelled goals
    keep their status.
    """
    goal.current_value = value
    if goal.status == GoalStatus.active and is_goal_reached(goal.goal_type, value, goal.target_value):
        _mark_completed(goal)

    return ProgressTracking(
        user_id=goal.user_id,
        goal_id=goal.id,
        metric_type="Custom",
        value=value,
        date_recorded=recorded_on or date.today(),
        notes=notes,
        data_source="Manual",
    )


def apply_status(goal: Goal, status: GoalStatus) -> Goal:
    if status == GoalStatus.completed:
        _mark_completed(goal)
    else:
        goal.status = status
    return goal


def calculate_goal_progress(goal_type: str, current_value: float, target_value: float) -> float:
    """Progress towards target as a 0-100 percentage, one decimal."""
    if not target_value:
        return 0.0

    current = current_value or 0
    if goal_type in DECREASING_GOAL_TYPES:
        progress = max(0.0, (target_value - current) / target_value * 100)
    else:
        progress = current / target_value * 100

    return round(min(100.0, max(0.0, progress)), 1)


def days_between(start: date, end: date) -> int:
    return (end - start).days
