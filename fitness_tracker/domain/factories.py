"""Construct fully formed entities from already validated input."""

from __future__ import annotations

from datetime import datetime
import uuid

from .activity import Activity, ActivityType
from .contracts import ActivityInput, GoalInput, InvalidEntityError
from .goal import Goal, MetricType
from .validation import coerce_datetime, utcnow, validate_activity, validate_goal


def create_activity(data: ActivityInput) -> Activity:
    """Build an :class:`Activity` with a freshly generated identifier.

    Raises :class:`InvalidEntityError` when ``data`` does not validate; callers
    are expected to validate first and report the errors themselves.
    """
    result = validate_activity(data)
    if not result.valid:
        raise InvalidEntityError(result)

    return Activity(
        id=str(uuid.uuid4()),
        type=ActivityType(data.type),
        date=coerce_datetime(data.date),
        duration=data.duration,
        distance=data.distance,
        calories=data.calories,
    )


def create_goal(data: GoalInput, now: datetime | None = None) -> Goal:
    """Build a :class:`Goal` stamped with ``created_at`` set to ``now``."""
    created_at = coerce_datetime(now) if now is not None else utcnow()
    result = validate_goal(data, now=created_at)
    if not result.valid:
        raise InvalidEntityError(result)

    return Goal(
        id=str(uuid.uuid4()),
        name=data.name,
        target_metric=MetricType(data.target_metric),
        target_value=data.target_value,
        deadline=coerce_datetime(data.deadline),
        created_at=created_at,
    )
