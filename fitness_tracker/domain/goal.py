from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MetricType(str, Enum):
    total_distance = "total_distance"
    total_duration = "total_duration"
    total_calories = "total_calories"
    workout_count = "workout_count"


class GoalStatus(str, Enum):
    active = "active"
    completed = "completed"
    missed = "missed"


@dataclass(slots=True)
class Goal:
    """A target over an aggregate metric, measured from ``created_at`` to ``deadline``."""

    id: str
    name: str
    target_metric: MetricType
    target_value: float
    deadline: datetime
    created_at: datetime


def goal_status(progress: float, now: datetime, deadline: datetime) -> GoalStatus:
    """Derive the goal status from its progress percentage and the clock.

    A goal at 100% is completed whether or not the deadline has passed; below
    that it is active until the deadline and missed from the deadline onwards.
    """
    if progress >= 100:
        return GoalStatus.completed
    if now >= deadline:
        return GoalStatus.missed
    return GoalStatus.active
